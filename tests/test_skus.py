"""Tests for SKU display labels."""
import pytest

from usage_report.skus import SKU_MAPPING, SKU_ORDER, format_sku, sku_sort_key


@pytest.mark.parametrize(
    "sku, expected",
    [
        ("actions_linux_4_core", "Ubuntu 4"),
        ("actions_windows_16_core_arm", "Windows 16 (ARM)"),
        ("actions_macos_xlarge", "MacOS 6 (M1)"),
        ("copilot_for_business", "Copilot Business"),
    ],
)
def test_mapped_skus(sku, expected):
    assert format_sku(sku) == expected


def test_unknown_sku_without_marker_is_unchanged():
    assert format_sku("totally_unknown_sku") == "totally_unknown_sku"


def test_empty_sku_is_unchanged():
    assert format_sku("") == ""


def test_compute_marker_skus_are_reformatted():
    assert format_sku("Actions Compute - UBUNTU_16_CORE") == "Ubuntu 16"
    assert format_sku("Compute - MACOS_12_CORE") == "MacOS 12"
    assert format_sku("Compute - WINDOWS") == "Windows"


@pytest.mark.parametrize(
    "sku, expected",
    [
        ("Compute - UBUNTU-LATEST_4_CORE", "Ubuntu-Latest 4"),
        ("Compute - WINDOWS/SERVER_8_CORE", "Windows/Server 8"),
    ],
)
def test_title_case_restarts_after_punctuation(sku, expected):
    assert format_sku(sku) == expected


def test_only_first_core_token_is_removed():
    assert format_sku("Compute - LINUX_CORE_CORE") == "Linux Core"


def test_arm_qualifier_checks_the_title_cased_label():
    # Title-casing turns ARM into Arm, so no qualifier is appended.
    assert format_sku("Compute - LINUX_4_CORE_ARM") == "Linux 4 Arm"


def test_sku_order_uses_display_labels():
    assert SKU_ORDER[0] == "Ubuntu 2"
    assert SKU_ORDER[-1] == "Copilot Business"
    assert all(label in SKU_MAPPING.values() for label in SKU_ORDER)


def test_sku_sort_key_puts_known_labels_first():
    labels = ["Zeta", "Windows 2", "Alpha", "Ubuntu 2"]
    assert sorted(labels, key=sku_sort_key) == ["Ubuntu 2", "Windows 2", "Alpha", "Zeta"]
