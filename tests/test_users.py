import random

import pytest

from santadraw.extensions import db
from santadraw.models import DrawRecord, Exclusion, GroupMember, Message, User
from santadraw.services.draws import execute_draw
from santadraw.services.errors import Conflict, Forbidden, NotFound
from santadraw.services.exclusions import block_member
from santadraw.services.messages import send_message
from santadraw.services.users import all_users, delete_user

from .helpers import make_group, make_user


@pytest.fixture()
def site_admin(app, ctx):
    app.config["SITE_ADMIN_NAME"] = "root"
    return make_user("root")


def test_only_site_admin_lists_users(site_admin):
    bia = make_user("bia")
    assert [u.name for u in all_users(site_admin)] == ["bia", "root"]
    with pytest.raises(Forbidden):
        all_users(bia)


def test_no_site_admin_configured(ctx):
    root = make_user("root")
    with pytest.raises(Forbidden):
        all_users(root)


def test_delete_user_cleans_up_group_state(site_admin):
    ana, bia, caio, duda = (make_user(n) for n in ("ana", "bia", "caio", "duda"))
    group = make_group(ana, bia, caio, duda)
    block_member(group.id, duda, bia.id)
    block_member(group.id, bia, duda.id)
    send_message(group.id, duda, "bye")
    execute_draw(group.id, ana, rng=random.Random(1))

    delete_user(duda.id, site_admin)
    db.session.expire_all()

    assert User.query.filter_by(name="duda").first() is None
    assert GroupMember.query.filter_by(group_id=group.id).count() == 3
    assert Exclusion.query.count() == 0
    assert Message.query.count() == 0
    assert DrawRecord.query.count() == 0


def test_delete_user_guards(site_admin):
    ana, bia = make_user("ana"), make_user("bia")
    make_group(ana, bia)
    with pytest.raises(Conflict):
        delete_user(ana.id, site_admin)
    with pytest.raises(Conflict):
        delete_user(site_admin.id, site_admin)
    with pytest.raises(NotFound):
        delete_user(999, site_admin)
    with pytest.raises(Forbidden):
        delete_user(bia.id, ana)
