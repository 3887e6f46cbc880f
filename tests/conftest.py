"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from property_cashflow.calculations import calculate_cashflow
from property_cashflow.models import LoanType
from tests.fixtures.test_inputs import get_example_form_data, get_example_inputs


@pytest.fixture
def example_inputs():
    """Get the reference purchase inputs."""
    return get_example_inputs()


@pytest.fixture
def example_form_data():
    """Get the reference purchase as raw form strings."""
    return get_example_form_data()


@pytest.fixture
def nsw_standard_result(example_inputs):
    """Reference purchase in NSW with a standard loan."""
    return calculate_cashflow(example_inputs, "NSW", LoanType.STANDARD)


@pytest.fixture
def nsw_smsf_result(example_inputs):
    """Reference purchase in NSW bought through an SMSF."""
    return calculate_cashflow(example_inputs, "NSW", LoanType.SMSF)
