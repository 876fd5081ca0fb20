from __future__ import annotations

import re
from typing import Dict, List, Tuple

SKU_MAPPING: Dict[str, str] = {
    "actions_linux": "Ubuntu 2",
    "actions_linux_16_core": "Ubuntu 16",
    "actions_linux_16_core_arm": "Ubuntu 16 (ARM)",
    "actions_linux_2_core_arm": "Ubuntu 2 (ARM)",
    "actions_linux_32_core": "Ubuntu 32",
    "actions_linux_32_core_arm": "Ubuntu 32 (ARM)",
    "actions_linux_4_core": "Ubuntu 4",
    "actions_linux_4_core_arm": "Ubuntu 4 (ARM)",
    "actions_linux_4_core_gpu": "Ubuntu 4 (GPU)",
    "actions_linux_64_core": "Ubuntu 64",
    "actions_linux_64_core_arm": "Ubuntu 64 (ARM)",
    "actions_linux_8_core": "Ubuntu 8",
    "actions_linux_8_core_arm": "Ubuntu 8 (ARM)",
    "actions_linux_2_core_advanced": "Ubuntu 2 (Advanced)",
    "actions_macos": "MacOS 3",
    "actions_macos_12_core": "MacOS 12",
    "actions_macos_8_core": "MacOS 8",
    "actions_macos_large": "MacOS 12 (x86)",
    "actions_macos_xlarge": "MacOS 6 (M1)",
    "actions_self_hosted_macos": "MacOS (Self-Hosted)",
    "actions_windows": "Windows 2",
    "actions_windows_16_core": "Windows 16",
    "actions_windows_16_core_arm": "Windows 16 (ARM)",
    "actions_windows_2_core_arm": "Windows 2 (ARM)",
    "actions_windows_32_core": "Windows 32",
    "actions_windows_32_core_arm": "Windows 32 (ARM)",
    "actions_windows_4_core": "Windows 4",
    "actions_windows_4_core_arm": "Windows 4 (ARM)",
    "actions_windows_4_core_gpu": "Windows 4 (GPU)",
    "actions_windows_64_core": "Windows 64",
    "actions_windows_64_core_arm": "Windows 64 (ARM)",
    "actions_windows_8_core": "Windows 8",
    "actions_windows_8_core_arm": "Windows 8 (ARM)",
    "actions_storage": "Actions Storage",
    "actions_custom_image_storage": "Custom Image Storage",
    "actions_unknown": "Actions Unknown",
    "copilot_enterprise": "Copilot Enterprise",
    "copilot_for_business": "Copilot Business",
    "git_lfs_storage": "Git LFS Storage",
    "packages_storage": "Packages Storage",
}

COMPUTE_MARKER = "Compute - "

_WORD_RE = re.compile(r"[^\W_]+")


def _titlecase(text: str) -> str:
    return _WORD_RE.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def format_sku(sku: str) -> str:
    """Return a display label for a raw SKU identifier.

    Mapped SKUs use the table above. Unmapped SKUs are only reformatted when
    they carry the ``"Compute - "`` marker, e.g. ``"Compute - MACOS_12_CORE"``
    becomes ``"MacOS 12"``; anything else is returned unchanged.
    """
    if not sku:
        return sku
    if sku in SKU_MAPPING:
        return SKU_MAPPING[sku]
    sku_parts = sku.split(COMPUTE_MARKER)
    if len(sku_parts) < 2:
        return sku
    runtime = sku_parts[1]
    formatted = runtime.replace("_", " ").replace(" CORE", "", 1)
    formatted = _titlecase(formatted)
    formatted = formatted.replace("Macos", "MacOS", 1)
    if "ARM" in formatted:
        return f"{formatted} (ARM)"
    return formatted


_SKU_ORDER_RAW: List[str] = [
    "actions_linux",
    "actions_linux_4_core",
    "actions_linux_8_core",
    "actions_linux_16_core",
    "actions_linux_32_core",
    "actions_linux_64_core",
    "actions_windows",
    "actions_windows_8_core",
    "actions_windows_16_core",
    "actions_windows_32_core",
    "actions_windows_64_core",
    "actions_macos",
    "actions_macos_12_core",
    "actions_macos_large",
    "actions_macos_xlarge",
    "actions_storage",
    "copilot_for_business",
]

# Display order of formatted labels.
SKU_ORDER: Tuple[str, ...] = tuple(format_sku(sku) for sku in _SKU_ORDER_RAW)


def sku_sort_key(label: str) -> Tuple[int, str]:
    """Sort key placing known labels in display order ahead of the rest."""
    try:
        return SKU_ORDER.index(label), ""
    except ValueError:
        return len(SKU_ORDER), label
