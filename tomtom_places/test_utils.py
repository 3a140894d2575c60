"""
Tests for common utilities, dood!
"""

import json
import os

from tests.utils import VALID_RESULTS
from tomtom_places.utils import jsonDumps, load_dotenv


def test_json_dumps_dataclasses():
    """Test dataclasses are dumped as dicts, None kept as null"""
    data = json.loads(jsonDumps({"Test address": VALID_RESULTS[:1]}))

    assert data == {
        "Test address": [
            {
                "placeId": "test1",
                "streetNumber": None,
                "countryCode": "AU",
                "country": "Australia",
                "freeformAddress": "First test street",
                "municipality": None,
            }
        ]
    }


def test_json_dumps_compact_and_indent():
    """Test compact separators are used unless indent is passed"""
    assert jsonDumps({"b": 1, "a": "é"}) == '{"a":"é","b":1}'
    assert jsonDumps({"a": 1}, indent=2) == '{\n  "a": 1\n}'


def test_load_dotenv(tmp_path, monkeypatch):
    """Test .env parsing with comments, quotes and export prefix"""
    monkeypatch.setenv("DOTENV_EXISTING", "from-env")
    envFile = tmp_path / ".env"
    envFile.write_text(
        "# comment\n"
        "\n"
        'DOTENV_QUOTED="quoted value"\n'
        "export DOTENV_EXPORTED=exported\n"
        "DOTENV_WITH_EQUALS=a=b\n"
        "DOTENV_EXISTING=from-file\n"
        "not a variable\n"
    )
    for name in ("DOTENV_QUOTED", "DOTENV_EXPORTED", "DOTENV_WITH_EQUALS"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    values = load_dotenv(str(envFile))

    assert values == {
        "DOTENV_QUOTED": "quoted value",
        "DOTENV_EXPORTED": "exported",
        "DOTENV_WITH_EQUALS": "a=b",
        "DOTENV_EXISTING": "from-file",
    }
    assert os.environ["DOTENV_QUOTED"] == "quoted value"
    # Existing variables are not overridden
    assert os.environ["DOTENV_EXISTING"] == "from-env"


def test_load_dotenv_missing_file(tmp_path):
    """Test a missing .env file is not an error"""
    assert load_dotenv(str(tmp_path / "missing.env")) == {}


def test_load_dotenv_no_populate(tmp_path, monkeypatch):
    """Test populateEnv=False only returns the values"""
    monkeypatch.setenv("DOTENV_NOT_POPULATED", "")
    monkeypatch.delenv("DOTENV_NOT_POPULATED")
    envFile = tmp_path / ".env"
    envFile.write_text("DOTENV_NOT_POPULATED=1\n")

    assert load_dotenv(str(envFile), populateEnv=False) == {"DOTENV_NOT_POPULATED": "1"}
    assert "DOTENV_NOT_POPULATED" not in os.environ
