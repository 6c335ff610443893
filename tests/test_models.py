import pytest
from freezegun import freeze_time
from sqlalchemy.exc import IntegrityError

from models import (
    DonationCategory,
    Donor,
    Organization,
    User,
    UserStatus,
    UserStatusException,
    WeighingCategory,
    generate_api_token,
    parse_address,
    verify_api_token,
)


def test_api_token_round_trip():
    token = generate_api_token("abc", 42, 7)
    assert verify_api_token("abc", token) == 42


def test_api_token_wrong_key():
    token = generate_api_token("abc", 42, 7)
    assert verify_api_token("abd", token) is None
    assert verify_api_token("abc", "not.a.token") is None


def test_api_token_expires():
    with freeze_time("2024-06-01 12:00:00"):
        token = generate_api_token("abc", 42, 7, expiry_days=7)
    with freeze_time("2024-06-07 12:00:00"):
        assert verify_api_token("abc", token) == 42
    with freeze_time("2024-06-09 12:00:00"):
        assert verify_api_token("abc", token) is None


def test_get_user_by_email(user):
    assert User.get_by_email(email=user.email) == user
    assert User.get_by_email(email=user.email.upper()) == user


def test_does_user_exist(user):
    assert User.does_user_exist(user.email)
    assert not User.does_user_exist("sir.notappearinginthisfilm@test.invalid")


def test_get_by_api_token(app, user):
    token = user.generate_api_token(app.config["SECRET_KEY"])
    assert User.get_by_api_token(app.config["SECRET_KEY"], token) == user


def test_password(user):
    assert not user.check_password("hunter2")
    user.set_password("hunter2")
    assert user.check_password("hunter2")
    assert not user.check_password("hunter3")


def test_status_transitions(db, user, make_user):
    newbie = make_user("newbie@example.com", "New", status=UserStatus.PENDING)

    newbie.set_status(UserStatus.APPROVED, actor=user)
    assert newbie.approved_by_id == user.id
    assert newbie.approved_at is not None

    with pytest.raises(UserStatusException):
        newbie.set_status(UserStatus.DENIED)

    newbie.set_status("PENDING")
    assert newbie.approved_at is None
    assert newbie.approved_by_id is None

    newbie.set_status(UserStatus.DENIED, actor=user, reason="Spam")
    assert newbie.denial_reason == "Spam"

    with pytest.raises(UserStatusException):
        newbie.set_status("SUSPENDED")
    db.session.commit()


def test_name(db, org):
    assert User("x@example.com", "Solo", organization=org).name == "Solo"
    assert User("y@example.com", "Two", "Names", organization=org).name == "Two Names"
    db.session.rollback()


def test_weighing_category_weights():
    weighing = WeighingCategory(category="Crate")
    weighing.set_weight(10, "kg")
    assert (weighing.kilograms, weighing.pounds) == (10, 22.05)

    weighing.set_weight(10, "lb")
    assert (weighing.kilograms, weighing.pounds) == (4.54, 10)

    with pytest.raises(ValueError):
        weighing.set_weight(10, "stone")


def test_parse_address():
    assert parse_address('["1 Main St", "2 Side St"]') == ["1 Main St", "2 Side St"]
    for bad in ("{}", "[]", '[""]', "[1]", "nope"):
        with pytest.raises(ValueError):
            parse_address(bad)


def test_organization_stats(db, org, user):
    assert Organization.get_by_name("Test Kitchen") == org
    stats = org.get_stats()
    assert stats["total_users"] >= 1
    assert stats["total_shifts"] == 0


@pytest.mark.parametrize("model", [Donor, DonationCategory])
def test_names_are_unique_per_organization(db, org, model):
    db.session.add(model(organization=org, name="Seaside"))
    db.session.commit()
    assert model.get_by_name(org.id, "Seaside") is not None

    db.session.add(model(organization=org, name="Seaside"))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()

    other = Organization(f"{model.__name__} Kitchen")
    db.session.add(other)
    db.session.add(model(organization=other, name="Seaside"))
    db.session.commit()
