from __future__ import annotations

from aksgate.core.errors import ErrorCode


def test_exit_codes_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.CONFIG_ERROR) == 2
    assert int(ErrorCode.NO_ENVIRONMENT) == 3
    assert int(ErrorCode.COORDINATES_UNRESOLVED) == 4
    assert int(ErrorCode.OVERRIDE_REJECTED) == 5
    assert int(ErrorCode.IO_ERROR) == 6


def test_str_and_success() -> None:
    assert str(ErrorCode.COORDINATES_UNRESOLVED) == "coordinates unresolved"
    assert ErrorCode.OK.is_success
    assert not ErrorCode.IO_ERROR.is_success
