"""Shared fixtures for the Menh Scoring Engine tests."""

import random

import pytest

from menh_engine.models.analysis_config import AnalysisConfig, create_default_analysis_config

# Hand-checked numbers for menh Kim with the default weights and thresholds.
# Kim: 0/2/5/8 sinh, 6/7 cung, 3/4 bi khac, 9 khac, 1 sinh xuat.
PASS_13 = "0966781234"  # sinh 3, cung 3, bi_khac 2, sinh_xuat 1, khac 1
PASS_13_TWIN = "0966781243"  # same digits, same score
PASS_15 = "0766521134"  # sinh 3, cung 3, bi_khac 2, sinh_xuat 2
PASS_11 = "0766521111"  # sinh 3, cung 3, sinh_xuat 4
PARITY_OK_15 = "0766121534"  # 5 even digits, half sums 20 and 15

FAIL_KHAC = "0999781234"
FAIL_BI_KHAC = "0333678123"
FAIL_SINH = "1166771134"
FAIL_CUNG = "0258111134"
FAIL_ANY = "0966282828"


@pytest.fixture
def kim_config() -> AnalysisConfig:
    return create_default_analysis_config(user_menh="Kim")


@pytest.fixture
def kim_config_dict() -> dict:
    return create_default_analysis_config(user_menh="Kim").model_dump(mode="json")


@pytest.fixture
def random_numbers() -> str:
    """A few thousand deterministic 10-digit numbers, one per line"""
    rng = random.Random(20240601)
    lines = ["0" + "".join(rng.choice("0123456789") for _ in range(9)) for _ in range(3000)]
    return "\n".join(lines)
