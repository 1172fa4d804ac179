from mcastguard.channel.method_response import MethodResponse, ResponseStatus
from mcastguard.errors import ReleaseFailedError


def test_success_to_dict() -> None:
    response = MethodResponse.success(True)

    assert response.is_success
    assert response.to_dict() == {"status": "success", "value": True}


def test_error_to_dict() -> None:
    response = MethodResponse.error("ERR", "no network", {"errno": 19})

    assert response.is_error
    assert response.to_dict() == {
        "status": "error",
        "code": "ERR",
        "message": "no network",
        "details": {"errno": 19},
    }


def test_not_implemented_to_dict() -> None:
    response = MethodResponse.not_implemented()

    assert response.status is ResponseStatus.NOT_IMPLEMENTED
    assert not response.is_error
    assert response.to_dict() == {"status": "notImplemented"}


def test_from_exception_uses_error_code() -> None:
    response = MethodResponse.from_exception(ReleaseFailedError("busy"))

    assert response == MethodResponse.error("ERR", "busy")


def test_from_exception_without_message() -> None:
    response = MethodResponse.from_exception(ReleaseFailedError())

    assert response.error_code == "ERR"
    assert response.error_message is None
