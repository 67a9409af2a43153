"""Shared fixtures: a small set of record files on disk."""

import pytest

PROJECT_CSV = """project_id,project_name,start_date,end_date
P-1,Billing Revamp,2024-01-01,2024-01-11
"""

PHASES_CSV = """phase_name,start_date,end_date,status
Design,2024-01-01,2024-01-04,completed
Build,2024-01-04,2024-01-08,In_Progress
Test,2024-01-09,2024-01-11,NOT_STARTED
"""

DEFECTS_CSV = """defect_id,severity,open_date,fix_eta
BUG-1,critical,2024-01-02,2024-01-20
BUG-2,HIGH,2024-01-03,2024-01-07

BUG-3,Low,2024-01-03,2024-01-05
"""


@pytest.fixture
def record_files(tmp_path):
    """Write the three input files and return their paths."""
    paths = {}
    for name, body in (("project", PROJECT_CSV), ("phases", PHASES_CSV), ("defects", DEFECTS_CSV)):
        path = tmp_path / f"{name}.csv"
        path.write_text(body, encoding="utf-8")
        paths[name] = path
    return paths
