import pytest

# Adds R2 into R1. Four instructions, so "goto 5" is the halt line.
ADD_SOURCE = "\n".join([
    "in(R1, R2)",
    "if R2 == 0 goto 5;",
    "R2--;",
    "R1++;",
    "goto 1;",
    "out(R1)",
])

# Copies R1 into R2 through R3, restoring R1 afterwards.
COPY_SOURCE = "\n".join([
    "in(R1)",
    "R2 = 0;               # 1",
    "R3 = 0;               # 2",
    "if R1 == 0 goto 8;    # 3",
    "R1--;                 # 4",
    "R2++;                 # 5",
    "R3++;                 # 6",
    "goto 3;               # 7",
    "if R3 == 0 goto 12;   # 8",
    "R3--;                 # 9",
    "R1++;                 # 10",
    "goto 8;               # 11",
    "out(R2)",
])

LOOP_SOURCE = "\n".join([
    "in(R1)",
    "R1++;",
    "goto 1;",
    "out(R1)",
])


@pytest.fixture
def add_source():
    return ADD_SOURCE


@pytest.fixture
def copy_source():
    return COPY_SOURCE


@pytest.fixture
def loop_source():
    return LOOP_SOURCE
