import pytest

HOUSEHOLD_YAML = """\
description: Household
children:
  - description: Salary
    amount: 100
    frequency: week
    startDate: 2024-01-01
  - description: Bills
    startDate: 2024-01-04
    frequency: week
    children:
      - description: Rent
        amount: -40
      - description: Power
        amount: -10
scenarios:
  - name: Raise
    startDate: 2024-01-11
    clone:
      - description: Salary
        amount: 200
    children:
      - description: Bonus
        amount: 1000
        startDate: 2024-01-16
  - name: Same
    startDate: 2024-01-11
    clone:
      - Bills
"""


@pytest.fixture
def household_file(tmp_path):
    """Definition file with a weekly salary, weekly bills and two scenarios."""
    path = tmp_path / "household.yaml"
    path.write_text(HOUSEHOLD_YAML)
    return path
