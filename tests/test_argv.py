import pytest

from channelsnoop.argv import args_to_map, args_value


def test_empty_argument_list():
    assert args_to_map([]) == {}


def test_short_option_takes_next_argument():
    assert args_to_map(["prog", "-p", "8080"]) == {"p": "8080"}


def test_long_option_with_equals():
    assert args_to_map(["prog", "--port=9000", "-d", "en0"]) == {"port": "9000", "d": "en0"}


def test_flag_without_value():
    assert args_to_map(["prog", "--help"]) == {"help": ""}


def test_next_option_is_not_taken_as_value():
    assert args_to_map(["prog", "-v", "--dev", "x"]) == {"v": "", "dev": "x"}


@pytest.mark.parametrize("arg", ["-", "--", "---x", "-=a", "--=a"])
def test_malformed_options_are_ignored(arg):
    assert args_to_map(["prog", arg]) == {}


def test_only_first_equals_splits():
    assert args_to_map(["-a=b=c"]) == {"a": "b=c"}


def test_empty_equals_value_falls_back_to_next_argument():
    assert args_to_map(["-a=", "val"]) == {"a": "val"}


def test_plain_arguments_are_not_keys():
    result = args_to_map(["prog", "positional", "-k", "v"])
    assert "prog" not in result
    assert "positional" not in result
    assert result["k"] == "v"


def test_later_option_overrides_earlier():
    assert args_to_map(["-p", "1", "-p", "2"]) == {"p": "2"}


def test_args_value_picks_first_non_empty():
    assert args_value({"p": "", "port": "1"}, "d", "p", "port") == "1"


def test_args_value_prefers_earlier_key():
    assert args_value({"p": "7", "port": "1"}, "d", "p", "port") == "7"


def test_args_value_default_when_missing():
    assert args_value({}, "fallback", "p", "port") == "fallback"


def test_args_value_default_without_keys():
    assert args_value({"p": "7"}, "fallback") == "fallback"