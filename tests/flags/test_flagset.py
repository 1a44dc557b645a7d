"""
Tests for the argparse-backed FlagSet.
"""

from dataclasses import dataclass
from datetime import timedelta

from pydantic import AnyUrl, HttpUrl
import pytest

from structopt import ArgumentParseError, FlagSet
from structopt.flags import BoolValue, StringValue
from structopt.flags.values import RefValue


@dataclass
class Box:
    """Minimal Ref for a single value."""

    value: object = None

    def get(self) -> object:
        return self.value

    def set(self, value: object) -> None:
        self.value = value


class Counter:
    """Settable value that counts how often it was set."""

    def __init__(self):
        self.calls: list[str] = []

    def set(self, text: str) -> None:
        self.calls.append(text)

    def __str__(self) -> str:
        return ",".join(self.calls)


class TestRegistration:
    def test_var_methods_store_default(self, flag_set: FlagSet) -> None:
        box = Box()
        flag_set.duration_var(box, "timeout", timedelta(seconds=90), "timeout")

        assert box.value == timedelta(seconds=90)
        assert flag_set.lookup("timeout").default == "1m30s"
        assert "timeout" in flag_set

    def test_redefined_flag(self, flag_set: FlagSet) -> None:
        flag_set.string_var(Box(), "name", "", "")
        with pytest.raises(ArgumentParseError, match="flag redefined: name"):
            flag_set.int_var(Box(), "name", 0, "")

    @pytest.mark.parametrize("name", ["", "-x", "a=b"])
    def test_bad_flag_name(self, flag_set: FlagSet, name: str) -> None:
        with pytest.raises(ArgumentParseError):
            flag_set.var(Counter(), name)

    def test_lookup_missing(self, flag_set: FlagSet) -> None:
        assert flag_set.lookup("missing") is None


class TestParse:
    def test_single_and_double_dash(self, flag_set: FlagSet) -> None:
        a, b = Box(), Box()
        flag_set.string_var(a, "a", "", "")
        flag_set.int_var(b, "b", 0, "")

        flag_set.parse(["-a", "x", "--b=3"])

        assert a.value == "x"
        assert b.value == 3
        assert flag_set.parsed

    @pytest.mark.parametrize(
        "args,expected",
        [
            ([], False),
            (["-v"], True),
            (["-v=true"], True),
            (["-v=false"], False),
            (["-v=0"], False),
            (["--v=T"], True),
        ],
    )
    def test_bool_forms(self, flag_set: FlagSet, args: list[str], expected: bool) -> None:
        box = Box()
        flag_set.bool_var(box, "v", False, "verbose")
        flag_set.parse(args)
        assert box.value is expected

    def test_numeric_kinds(self, flag_set: FlagSet) -> None:
        i64, u64, f64 = Box(), Box(), Box()
        flag_set.int64_var(i64, "i64", 0, "")
        flag_set.uint64_var(u64, "u64", 0, "")
        flag_set.float64_var(f64, "f64", 0.0, "")

        flag_set.parse(["-i64", "-5", "-u64", "18446744073709551615", "-f64", "1e3"])

        assert i64.value == -5
        assert u64.value == 2**64 - 1
        assert f64.value == 1000.0

    def test_url_kinds(self, flag_set: FlagSet) -> None:
        any_url, http_url = Box(), Box()
        flag_set.url_var(any_url, "db", None, "")
        flag_set.url_var(http_url, "api", None, "", url_type=HttpUrl)

        flag_set.parse(["-db", "postgres://user@db:5432/app", "-api", "https://example.com/v1"])

        assert isinstance(any_url.value, AnyUrl)
        assert any_url.value.scheme == "postgres"
        assert http_url.value.path == "/v1"

    def test_http_url_rejects_other_schemes(self, flag_set: FlagSet) -> None:
        flag_set.url_var(Box(), "api", None, "", url_type=HttpUrl)
        with pytest.raises(ArgumentParseError):
            flag_set.parse(["-api", "ftp://example.com"])

    def test_value_is_set_per_occurrence(self, flag_set: FlagSet) -> None:
        counter = Counter()
        flag_set.var(counter, "tag", "tags")
        flag_set.parse(["-tag", "a", "-tag", "b"])
        assert counter.calls == ["a", "b"]

    def test_parsing_stops_at_first_argument(self, flag_set: FlagSet) -> None:
        a = Box()
        flag_set.string_var(a, "a", "", "")
        flag_set.parse(["-a", "x", "run", "-a", "y"])

        assert a.value == "x"
        assert flag_set.args == ["run", "-a", "y"]

    def test_terminator_is_consumed(self, flag_set: FlagSet) -> None:
        a = Box()
        flag_set.string_var(a, "s", "", "")
        flag_set.parse(["-s", "a", "--", "b", "-s"])

        assert a.value == "a"
        assert flag_set.args == ["b", "-s"]

    @pytest.mark.parametrize(
        "args,expected",
        [
            (["-f", "-1e3"], -1000.0),
            (["-f", "-inf"], float("-inf")),
            (["--f", "-2.5"], -2.5),
        ],
    )
    def test_negative_float_value(self, flag_set: FlagSet, args: list[str], expected: float) -> None:
        box = Box()
        flag_set.float64_var(box, "f", 0.0, "")
        flag_set.parse(args)
        assert box.value == expected

    def test_negative_duration_value(self, flag_set: FlagSet) -> None:
        box = Box()
        flag_set.duration_var(box, "d", timedelta(0), "")
        flag_set.parse(["-d", "-1s"])
        assert box.value == -timedelta(seconds=1)

    def test_dash_leading_string_value(self, flag_set: FlagSet) -> None:
        s, x = Box(), Box()
        flag_set.string_var(s, "s", "", "")
        flag_set.bool_var(x, "x", False, "")
        flag_set.parse(["-s", "-x"])

        assert s.value == "-x"
        assert x.value is False

    def test_value_containing_equals(self, flag_set: FlagSet) -> None:
        s = Box()
        flag_set.string_var(s, "s", "", "")
        flag_set.parse(["-s", "a=b"])
        assert s.value == "a=b"

    @pytest.mark.parametrize(
        "args,message",
        [
            (["-missing"], "unrecognized"),
            (["-n"], "expected one argument"),
            (["-n", "ten"], "invalid value"),
        ],
    )
    def test_errors_raise(self, flag_set: FlagSet, args: list[str], message: str) -> None:
        flag_set.int_var(Box(), "n", 0, "")
        with pytest.raises(ArgumentParseError, match=message):
            flag_set.parse(args)

    def test_help_requested(self, flag_set: FlagSet) -> None:
        with pytest.raises(ArgumentParseError, match="help requested"):
            flag_set.parse(["-h"])

    def test_user_flag_named_h(self, flag_set: FlagSet) -> None:
        box = Box()
        flag_set.string_var(box, "h", "", "host")
        flag_set.parse(["-h", "example.com"])
        assert box.value == "example.com"

    def test_exit_on_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        flag_set = FlagSet("prog", exit_on_error=True)
        flag_set.int_var(Box(), "n", 0, "")

        with pytest.raises(SystemExit) as exc_info:
            flag_set.parse(["-n", "ten"])

        assert exc_info.value.code == 2
        assert "prog" in capsys.readouterr().err


class TestHelp:
    def test_defaults_in_help(self) -> None:
        flag_set = FlagSet("prog")
        flag_set.string_var(Box(), "name", "gopher", "user name")
        flag_set.int_var(Box(), "count", 0, "how many, 100% sure")

        text = flag_set.format_help()

        assert "user name (default gopher)" in text
        assert "how many, 100% sure" in text
        assert "(default 0)" not in text

    def test_adapter_renders_current_value(self) -> None:
        box = Box("x")
        value = StringValue(box)
        box.set("y")
        assert str(value) == "y"
        assert str(BoolValue(Box(None))) == "false"

    def test_ref_value_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            RefValue(Box())
