from datetime import datetime
from flask_login import UserMixin
from .extensions import db, login_manager


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=True)

    # salted argon2 hash of the passphrase
    passkey_hash = db.Column(db.String(255), nullable=False)

    registered_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}


class Group(db.Model):
    __tablename__ = "groups"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    draw_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    admin = db.relationship("User", foreign_keys=[admin_id])
    members = db.relationship(
        "GroupMember", back_populates="group", cascade="all, delete-orphan", order_by="GroupMember.id"
    )
    exclusions = db.relationship("Exclusion", back_populates="group", cascade="all, delete-orphan")
    draw = db.relationship("DrawRecord", back_populates="group", uselist=False, cascade="all, delete-orphan")
    messages = db.relationship("Message", back_populates="group", cascade="all, delete-orphan")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "admin": self.admin.name,
            "draw_date": self.draw_date.isoformat() if self.draw_date else None,
            "members": [m.user.name for m in self.members],
            "drawn": self.draw is not None,
        }


class GroupMember(db.Model):
    __tablename__ = "group_members"

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    joined_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    group = db.relationship("Group", back_populates="members")
    user = db.relationship("User")

    __table_args__ = (
        db.UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )


class Exclusion(db.Model):
    """
    Directed block inside a group: blocker_id must not draw blocked_id.
    """
    __tablename__ = "exclusions"
    id = db.Column(db.Integer, primary_key=True)

    group_id = db.Column(db.Integer, db.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    blocker_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    blocked_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    group = db.relationship("Group", back_populates="exclusions")
    blocker = db.relationship("User", foreign_keys=[blocker_id])
    blocked = db.relationship("User", foreign_keys=[blocked_id])

    __table_args__ = (
        db.UniqueConstraint("group_id", "blocker_id", "blocked_id", name="uq_exclusion_group_pair"),
        db.CheckConstraint("blocker_id <> blocked_id", name="not_self"),
    )


class DrawRecord(db.Model):
    """One accepted draw per group; the unique group_id is the exclusivity guard."""
    __tablename__ = "draws"

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey("groups.id", ondelete="CASCADE"), unique=True, nullable=False)
    run_by_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    run_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    attempts = db.Column(db.Integer, nullable=False)
    repaired = db.Column(db.Boolean, default=False, nullable=False)

    group = db.relationship("Group", back_populates="draw")
    assignments = db.relationship("Assignment", back_populates="draw", cascade="all, delete-orphan")


class Assignment(db.Model):
    __tablename__ = "assignments"

    id = db.Column(db.Integer, primary_key=True)
    draw_id = db.Column(db.Integer, db.ForeignKey("draws.id", ondelete="CASCADE"), nullable=False)
    giver_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Encrypted receiver id (Fernet token string), never stored in plaintext.
    receiver_ciphertext = db.Column(db.Text, nullable=False)

    draw = db.relationship("DrawRecord", back_populates="assignments")
    giver = db.relationship("User", foreign_keys=[giver_id])

    __table_args__ = (
        db.UniqueConstraint("draw_id", "giver_id", name="uq_assignment_draw_giver"),
    )


class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    sender_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = db.Column(db.String(1000), nullable=False)
    is_anonymous = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    group = db.relationship("Group", back_populates="messages")
    sender = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "group_id": self.group_id,
            "group_name": self.group.name,
            "sender": "Anonymous" if self.is_anonymous else self.sender.name,
            "content": self.content,
            "anonymous": self.is_anonymous,
            "created_at": self.created_at.isoformat(),
        }


@login_manager.user_loader
def load_user(user_id: str):
    return db.session.get(User, int(user_id))
