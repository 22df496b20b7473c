"""
VerificationCoordinator against a simulated Telegram bot service.

Success is only reported when the bot explicitly says so; every
transport problem turns into a failure with a readable reason.
"""

import httpx
import pytest

from student_records.errors import DeliveryFailed, InvalidCode, MissingHandle, MissingInput


pytestmark = pytest.mark.anyio


async def test_request_code_success(verifier, bot):
    assert await verifier.request_code("@ali") == {"success": True}
    assert bot.calls == [("/send-verification-code", {"telegram": "@ali"})]


@pytest.mark.parametrize("handle", [None, ""])
async def test_request_code_requires_handle(verifier, bot, handle):
    with pytest.raises(MissingHandle):
        await verifier.request_code(handle)
    assert bot.calls == []


@pytest.mark.parametrize("reply", [
    (200, {"success": False}),
    (200, {"ok": True}),
    (200, {"success": "true"}),
    (200, [True]),
    (500, {"success": True}),
    (200, "not json"),
    (502, "<html>Bad Gateway</html>"),
])
async def test_request_code_never_claims_unreported_success(verifier, bot, reply):
    bot.reply = reply

    with pytest.raises(DeliveryFailed) as exc:
        await verifier.request_code("@ali")
    assert exc.value.message == "Failed to send verification code"


async def test_request_code_carries_service_error(verifier, bot):
    bot.reply = (404, {"success": False, "error": "User has not started the bot"})

    with pytest.raises(DeliveryFailed) as exc:
        await verifier.request_code("@ali")
    assert exc.value.message == "User has not started the bot"


@pytest.mark.parametrize("error", [
    httpx.ConnectError("connection refused"),
    httpx.ReadTimeout("timed out"),
])
async def test_request_code_transport_errors(verifier, bot, error):
    bot.reply = error

    with pytest.raises(DeliveryFailed):
        await verifier.request_code("@ali")


async def test_verify_code_success(verifier, bot):
    assert await verifier.verify_code("@ali", "123456") == {"success": True}
    assert bot.calls == [("/verify-code", {"telegram": "@ali", "code": "123456"})]


@pytest.mark.parametrize("handle,code", [(None, "1"), ("@ali", None), ("", ""), ("@ali", "")])
async def test_verify_code_requires_both_fields(verifier, bot, handle, code):
    with pytest.raises(MissingInput):
        await verifier.verify_code(handle, code)
    assert bot.calls == []


async def test_verify_code_rejection_uses_service_message(verifier, bot):
    bot.reply = (400, {"success": False, "error": "Code expired"})

    with pytest.raises(InvalidCode) as exc:
        await verifier.verify_code("@ali", "000000")
    assert exc.value.message == "Code expired"


async def test_verify_code_rejection_default_message(verifier, bot):
    bot.reply = (200, {"success": False})

    with pytest.raises(InvalidCode) as exc:
        await verifier.verify_code("@ali", "000000")
    assert exc.value.message == "Invalid verification code"


@pytest.mark.parametrize("reply", [httpx.ConnectError("refused"), (200, "garbage")])
async def test_verify_code_transport_failure(verifier, bot, reply):
    bot.reply = reply

    with pytest.raises(DeliveryFailed) as exc:
        await verifier.verify_code("@ali", "123456")
    assert exc.value.message == "Failed to verify code"
