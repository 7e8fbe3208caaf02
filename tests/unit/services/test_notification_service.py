# tests/unit/services/test_notification_service.py
import smtplib

import pytest

from stockroom.services.notification_service import EmailNotificationService


@pytest.fixture
def smtp_settings(settings):
    return settings.model_copy(update={
        "SMTP_HOST": "smtp.test.com",
        "SMTP_USERNAME": "alerts@test.com",
        "SMTP_PASSWORD": "secret",
    })


@pytest.mark.asyncio
async def test_no_recipients_skips(settings, mocker):
    service = EmailNotificationService(settings)
    send_sync = mocker.patch.object(service, "_send_sync")

    assert await service.send([], "Subject", "Body") is False
    assert await service.send(["", "  "], "Subject", "Body") is False
    send_sync.assert_not_called()


@pytest.mark.asyncio
async def test_unconfigured_smtp_logs_only(settings, mocker, caplog):
    service = EmailNotificationService(settings)
    send_sync = mocker.patch.object(service, "_send_sync")

    with caplog.at_level("INFO"):
        assert await service.send(["a@test.com"], "Stock Update - Widget", "Body") is False

    send_sync.assert_not_called()
    assert "Stock Update - Widget" in caplog.text


@pytest.mark.asyncio
async def test_configured_smtp_dispatches_message(smtp_settings, mocker):
    service = EmailNotificationService(smtp_settings)
    send_sync = mocker.patch.object(service, "_send_sync")

    sent = await service.send(["b@test.com", "a@test.com", "a@test.com"], "Subject", "Body", priority="high")

    assert sent is True
    message = send_sync.call_args.args[0]
    assert message["To"] == "a@test.com, b@test.com"
    assert message["Subject"] == "Subject"
    assert message["X-Priority"] == "1"
    assert "Stockroom Alerts" in message["From"]


@pytest.mark.asyncio
async def test_smtp_failure_returns_false(smtp_settings, mocker):
    service = EmailNotificationService(smtp_settings)
    mocker.patch.object(service, "_send_sync", side_effect=smtplib.SMTPException("rejected"))

    assert await service.send(["a@test.com"], "Subject", "Body") is False
