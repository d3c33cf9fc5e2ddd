"""Shared diff buffers for Diff Studio tests."""

import pytest

SAMPLE_DIFF = (
    "diff --git a/hello.txt b/hello.txt\n"  # 0
    "index 1111111..2222222 100644\n"       # 1
    "--- a/hello.txt\n"                      # 2
    "+++ b/hello.txt\n"                      # 3
    "@@ -1,4 +1,4 @@\n"                      # 4
    " one\n"                                 # 5
    "-two\n"                                 # 6
    "+TWO\n"                                 # 7
    " three\n"                               # 8
    "-four\n"                                # 9
    "+FOUR\n"                                # 10
)

COMBINED_DIFF = (
    "diff --cc hello.txt\n"                  # 0
    "index 1111111,2222222..3333333\n"       # 1
    "--- a/hello.txt\n"                      # 2
    "+++ b/hello.txt\n"                      # 3
    "@@@ -1,2 -1,2 +1,4 @@@\n"               # 4
    "  one\n"                                # 5
    " +theirs\n"                             # 6
    "+ ours\n"                               # 7
    "++both\n"                               # 8
)


@pytest.fixture
def sample_diff() -> str:
    return SAMPLE_DIFF


@pytest.fixture
def combined_diff() -> str:
    return COMBINED_DIFF
