import pytest

from vcverifier.health import Health, health_response


def failing():
    raise RuntimeError("db down")


def test_no_checks_is_ok():
    result = Health("vcverifier").measure()
    assert result["status"] == "OK"
    assert result["component"] == {"name": "vcverifier"}
    assert "failures" not in result


def test_failing_check_makes_unavailable():
    health = Health("svc")
    health.register("db", failing)
    health.register("cache", lambda: None)
    result = health.measure()
    assert result["status"] == "Unavailable"
    assert result["failures"] == {"db": "db down"}


def test_response_ok_is_200():
    health = Health("svc")
    health.register("cache", lambda: True)
    status, body = health_response(health)
    assert status == 200
    assert body["status"] == "OK"


def test_response_failure_is_503():
    health = Health("svc")
    health.register("db", failing)
    status, body = health_response(health)
    assert status == 503
    assert body["failures"] == {"db": "db down"}


def test_default_health_is_ok():
    status, body = health_response()
    assert status == 200
    assert body["component"]["name"] == "vcverifier"


def test_register_replaces_check():
    health = Health("svc")
    health.register("db", failing)
    health.register("db", lambda: None)
    assert health.measure()["status"] == "OK"


def test_register_rejects_non_callable():
    with pytest.raises(TypeError):
        Health("svc").register("db", "not callable")