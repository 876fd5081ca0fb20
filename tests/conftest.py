import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

LEGACY_15_HEADER = (
    "usage_at,product,sku,quantity,unit_type,applied_cost_per_quantity,gross_amount,"
    "discount_amount,net_amount,username,organization,repository_name,workflow_name,"
    "workflow_path,cost_center_name"
)
LEGACY_14_HEADER = (
    "date,product,sku,quantity,unit_type,applied_cost_per_quantity,gross_amount,"
    "discount_amount,net_amount,username,organization,repository,workflow_path,cost_center_name"
)
SUMMARIZED_12_HEADER = (
    "date,product,sku,quantity,unit_type,applied_cost_per_quantity,gross_amount,"
    "discount_amount,net_amount,organization,repository,cost_center_name"
)


@pytest.fixture
def legacy15_csv() -> str:
    rows = [
        LEGACY_15_HEADER,
        "2024-03-03,actions,actions_linux,10,minutes,0.008,0.08,0,0.08,octocat,acme,acme/web,CI,.github/workflows/ci.yml,",
        "2024-03-01,actions,actions_windows,5,minutes,0.016,0.08,0,0.08,hubot,acme,acme/api,Deploy,.github/workflows/deploy.yml,eng",
        "2024-03-02,git_lfs,git_lfs_storage,1.5,gigabyte-hours,0.07,0.105,0,0.105,octocat,acme,acme/web,,,",
        "2024-04-01,copilot,copilot_for_business,1,user-months,19,19,0,19,octocat,acme,,,,eng",
        "2024-03-02,actions,actions_linux,4,minutes,0.008,0.032,0,0.032,hubot,acme,acme/api,CI,.github/workflows/ci.yml,",
    ]
    return "\n".join(rows) + "\n"


@pytest.fixture
def legacy14_csv() -> str:
    rows = [
        LEGACY_14_HEADER,
        "2024-05-01,actions,actions_linux,3,minutes,0.008,0.024,0,0.024,octocat,acme,acme/web,.github/workflows/ci.yml,",
        "2024-05-02,actions,actions_linux,7,minutes,0.008,0.056,0,0.056,,acme,acme/web,,",
    ]
    return "\r\n".join(rows)


@pytest.fixture
def summarized_csv() -> str:
    rows = [
        SUMMARIZED_12_HEADER,
        '"2024-06-02","actions","actions_linux","20","minutes","0.008","0.16","0","0.16","acme","acme/web",""',
        '"2024-06-01","codespaces","codespaces_compute_2_core","2","hours","0.18","0.36","0","0.36","acme","acme/dev",""',
    ]
    return "\n".join(rows)
