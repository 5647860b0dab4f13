"""Unit tests for path escaping"""
import pytest
from file_contexts_gen.utils.regex_utils import escape_regex, REGEX_METACHARACTERS

def test_escape_regex_empty():
    assert escape_regex("") == ""

def test_escape_regex_plain_path_unchanged():
    """Paths without metacharacters pass through"""
    path = "bin/hw/android-hardware_foo@1"
    assert escape_regex(path) == path
    assert escape_regex(escape_regex(path)) == path

def test_escape_regex_escapes_dots():
    assert escape_regex("etc/init/vold.rc") == r"etc/init/vold\.rc"

@pytest.mark.parametrize("char", sorted(REGEX_METACHARACTERS))
def test_escape_regex_each_metacharacter(char):
    assert escape_regex(f"a{char}b") == f"a\\{char}b"

def test_escape_regex_leaves_backslashes():
    """Existing backslashes are not doubled"""
    assert escape_regex("a\\b") == "a\\b"

def test_escape_regex_mixed():
    assert escape_regex("lib/libc++.so") == r"lib/libc\+\+\.so"
    assert escape_regex("app/Foo (1)/[x]") == r"app/Foo \(1\)/\[x\]"
