"""Tests for the svcbind command line."""

import json
import tempfile

from click.testing import CliRunner

from svcbind.cli import main
from svcbind.loader import VCAP_SERVICES_ENV


SERVICES = {
    "redis": [
        {"name": "cache-a", "label": "redis-1.2", "tags": ["kv"]},
        {"name": "cache-b", "label": "redis-2.0", "tags": ["kv"]},
    ],
    "user-provided": [
        {
            "name": "my-elasticsearch",
            "label": "user-provided",
            "tags": [],
            "credentials": {"uri": "https://es.example.com", "user": "elastic"},
        }
    ],
}


def _write_services(data: dict = SERVICES) -> str:
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False)
    json.dump(data, f)
    f.close()
    return f.name


def test_list():
    result = CliRunner().invoke(main, ["list", "-f", _write_services()])
    assert result.exit_code == 0
    assert "cache-a" in result.output
    assert "my-elasticsearch" in result.output


def test_list_empty_environment():
    result = CliRunner().invoke(main, ["list"], env={VCAP_SERVICES_ENV: ""})
    assert result.exit_code == 0
    assert "No services are bound" in result.output


def test_find():
    result = CliRunner().invoke(main, ["find", "elasticsearch", "-f", _write_services()])
    assert result.exit_code == 0
    assert "my-elasticsearch" in result.output


def test_find_first_of_many():
    result = CliRunner().invoke(main, ["find", "redis", "-f", _write_services()])
    assert result.exit_code == 0
    assert "cache-a" in result.output
    assert "cache-b" not in result.output


def test_find_no_match():
    result = CliRunner().invoke(main, ["find", "mongo", "-f", _write_services()])
    assert result.exit_code == 1
    assert "No service matches" in result.output


def test_check_ok():
    result = CliRunner().invoke(
        main, ["check", "elasticsearch", "-c", "uri", "-c", "username,user", "-f", _write_services()]
    )
    assert result.exit_code == 0
    assert "OK" in result.output


def test_check_missing_credential():
    result = CliRunner().invoke(
        main, ["check", "elasticsearch", "-c", "password", "-f", _write_services()]
    )
    assert result.exit_code == 1
    assert "NO MATCH" in result.output


def test_check_ambiguous():
    result = CliRunner().invoke(main, ["check", "redis", "-f", _write_services()])
    assert result.exit_code == 2
    assert "AMBIGUOUS" in result.output


def test_check_from_environment():
    result = CliRunner().invoke(
        main,
        ["check", "elasticsearch", "-c", "uri"],
        env={VCAP_SERVICES_ENV: json.dumps(SERVICES)},
    )
    assert result.exit_code == 0


def test_invalid_payload():
    result = CliRunner().invoke(main, ["list"], env={VCAP_SERVICES_ENV: "[1, 2]"})
    assert result.exit_code == 2
    assert "Failed to load services" in result.output


def test_check_invalid_filter():
    result = CliRunner().invoke(main, ["check", "(", "-f", _write_services()])
    assert result.exit_code == 2
    assert "Invalid filter" in result.output


def test_find_invalid_filter():
    result = CliRunner().invoke(main, ["find", "[unclosed", "-f", _write_services()])
    assert result.exit_code == 2
    assert "Invalid filter" in result.output


def test_find_non_string_values():
    path = _write_services(
        {"db": [{"label": "mysql", "tags": [5, "sql"], "credentials": "not-a-mapping"}]}
    )
    result = CliRunner().invoke(main, ["find", "mysql", "-f", path])
    assert result.exit_code == 0
    assert "5, sql" in result.output
