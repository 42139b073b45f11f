import pytest
from pydantic import ValidationError

from portal.config import Settings
from portal.core.security import Permission, Role, resolve_principal


def make_settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


def test_env_lists_and_mappings_are_parsed(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.org, https://b.org")
    monkeypatch.setenv("USER_ROLES", "Pastor@X.org=admin, helper@x.org=approver")
    monkeypatch.setenv("APPROVAL_COORDINATOR_EMAILS", '{"adult-discipleship": "adults@x.org"}')
    monkeypatch.setenv("APPROVER_SCOPES", '{"approver": ["Youth Ministry"]}')

    config = Settings(_env_file=None)

    assert config.CORS_ORIGINS == ["https://a.org", "https://b.org"]
    assert config.USER_ROLES == {"pastor@x.org": "admin", "helper@x.org": "approver"}
    assert config.APPROVAL_COORDINATOR_EMAILS == {"adult-discipleship": "adults@x.org"}
    assert config.APPROVER_SCOPES == {"approver": ["Youth Ministry"]}


def test_cors_origins_accept_json_list():
    assert make_settings(CORS_ORIGINS='["https://a.org"]').CORS_ORIGINS == ["https://a.org"]


def test_notification_backend_is_validated():
    assert make_settings(NOTIFICATION_BACKEND="EMAIL").NOTIFICATION_BACKEND == "email"
    with pytest.raises(ValidationError):
        make_settings(NOTIFICATION_BACKEND="pigeon")


def test_bulk_limit_default():
    assert make_settings().APPROVAL_MAX_BULK_SIZE == 100


def test_unlisted_staff_default_to_least_privileged_role():
    config = make_settings()

    assert config.DEFAULT_USER_ROLE == "approver"
    assert resolve_principal("stranger@x.org", config).role == Role.APPROVER


def test_principal_roles_and_scopes():
    config = make_settings(
        USER_ROLES="lead@x.org=admin,helper@x.org=approver,odd@x.org=superuser",
        DEFAULT_USER_ROLE="approver",
    )

    lead = resolve_principal("Lead@X.org ", config)
    helper = resolve_principal("helper@x.org", config)
    odd = resolve_principal("odd@x.org", config)

    assert lead.email == "lead@x.org"
    assert lead.role == Role.ADMIN
    assert lead.approval_scope is None
    assert lead.can_review("Youth Ministry")

    assert helper.role == Role.APPROVER
    assert helper.has_permission(Permission.REVIEW_APPROVALS)
    assert not helper.has_permission(Permission.MANAGE_MINISTRIES)
    assert helper.can_review("  adult bible STUDY ")
    assert not helper.can_review("Youth Ministry")
    assert not helper.can_review(None)

    # Unknown roles fall back to the default
    assert odd.role == Role.APPROVER
