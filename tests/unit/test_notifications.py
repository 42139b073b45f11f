import smtplib
from datetime import date

import pytest

from portal.config import settings
from portal.models import Announcement
from portal.services.notification import (
    EmailNotificationSender,
    LoggingNotificationSender,
    NotificationDispatcher,
    NotificationEvent,
    build_notification_sender,
    resolve_coordinator_address,
)
from portal.utils import email as email_utils
from portal.utils.email import EmailConfig, EmailError, EmailMessage


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.started_tls = False
        self.logged_in = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg, to_addrs=None):
        self.messages.append((msg, to_addrs))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(email_utils.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def email_sender():
    config = settings.model_copy(
        update={
            "NOTIFICATION_BACKEND": "email",
            "EMAIL_FROM_ADDRESS": "communications@x.org",
            "EMAIL_FROM_NAME": "St. Helen Communications",
            "SMTP_USER": "mailer",
            "SMTP_PASSWORD": "secret",
        }
    )
    return EmailNotificationSender(config)


@pytest.fixture
def announcement():
    return Announcement(
        id="a-1",
        name="Jane Doe",
        email="jane@x.org",
        ministry="Adult Bible Study",
        event_date=date(2026, 11, 5),
        event_time="7:00 PM",
        platforms=["Email Blast", "Bulletin"],
        announcement_body="Study night <b>moved</b> to the parish hall",
        approval_status="pending",
        requires_approval=True,
        approval_coordinator="adult-discipleship",
    )


@pytest.mark.parametrize("event", NotificationEvent.ALL)
def test_every_event_has_a_template(email_sender, announcement, event):
    message = email_sender.render(event, announcement, {"reason": "Add a contact number"})

    assert message.subject.startswith("St. Helen Communications ")
    assert "St. Helen Communications" in message.body_html


def test_approved_email_goes_to_submitter(email_sender, announcement):
    message = email_sender.render(NotificationEvent.APPROVED, announcement)

    assert message.to == ["jane@x.org"]
    assert message.subject == "St. Helen Communications Announcement Approved"
    assert "Hello Jane Doe" in message.body_html
    assert "<strong>Adult Bible Study</strong>" in message.body_html


def test_rejected_email_includes_feedback(email_sender, announcement):
    message = email_sender.render(
        NotificationEvent.REJECTED, announcement, {"reason": "Please add the room number"}
    )

    assert "Please add the room number" in message.body_html
    assert "resubmit" in message.body_html


def test_pending_review_goes_to_coordinator_and_escapes_body(email_sender, announcement):
    message = email_sender.render(NotificationEvent.PENDING_REVIEW, announcement)

    assert message.to == ["adults@x.org"]
    assert message.reply_to == "jane@x.org"
    assert "&lt;b&gt;moved&lt;/b&gt;" in message.body_html


def test_pending_review_without_coordinator_address_fails(email_sender, announcement):
    announcement.approval_coordinator = "youth-office"

    with pytest.raises(ValueError):
        email_sender.render(NotificationEvent.PENDING_REVIEW, announcement)


def test_unknown_event_is_rejected(email_sender, announcement):
    with pytest.raises(ValueError):
        email_sender.render("archived", announcement)


def test_notify_sends_over_smtp(email_sender, announcement, fake_smtp):
    email_sender.notify(NotificationEvent.APPROVED, announcement)

    [server] = fake_smtp.instances
    msg, recipients = server.messages[0]
    assert server.started_tls is True
    assert server.logged_in == ("mailer", "secret")
    assert recipients == ["jane@x.org"]
    assert msg["From"] == '"St. Helen Communications" <communications@x.org>'


def test_smtp_failure_raises_email_error(monkeypatch):
    class Refusing(FakeSMTP):
        def send_message(self, msg, to_addrs=None):
            raise smtplib.SMTPRecipientsRefused({})

    monkeypatch.setattr(email_utils.smtplib, "SMTP", Refusing)
    config = EmailConfig(smtp_host="mail", smtp_port=25, use_tls=False, from_email="a@x.org")

    with pytest.raises(EmailError):
        email_utils.send_email(EmailMessage(subject="Hi", to=["b@x.org"], body_text="x"), config)


def test_message_requires_valid_recipient():
    with pytest.raises(EmailError):
        EmailMessage(subject="Hi", to=["not-an-address"], body_text="x")


def test_coordinator_address_resolution():
    assert resolve_coordinator_address("adult-discipleship", settings) == "adults@x.org"
    assert resolve_coordinator_address("pastor@x.org", settings) == "pastor@x.org"
    assert resolve_coordinator_address(None, settings) == "adults@x.org"
    assert resolve_coordinator_address("unknown", settings) is None


def test_dispatcher_swallows_sender_failures(announcement):
    class Broken:
        def notify(self, event_kind, submission, extra=None):
            raise ConnectionError("mail relay down")

    assert NotificationDispatcher(Broken()).dispatch("approved", announcement) is False


def test_dispatcher_reports_success(announcement):
    sender = LoggingNotificationSender()

    assert NotificationDispatcher(sender).dispatch("approved", announcement) is True
    assert sender.sent[0]["announcement_id"] == "a-1"


def test_backend_selection():
    email_config = settings.model_copy(update={"NOTIFICATION_BACKEND": "email"})

    assert isinstance(build_notification_sender(settings), LoggingNotificationSender)
    assert isinstance(build_notification_sender(email_config), EmailNotificationSender)
