"""Fixtures shared by the expression conformance cases.

Each case table under this directory is run once per registered runner, so
a new way of evaluating expressions only has to be added here.
"""

import pytest
from tests.conformance.runners.interpreter_runner import InterpreterRunner


def get_available_runners():
    """Return the runners every conformance case is checked against."""
    return [InterpreterRunner()]


@pytest.fixture(params=get_available_runners(), ids=lambda r: r.name)
def runner(request):
    """Parse and evaluate case sources through one runner.

    The ``interpreter`` runner goes through ``parse`` and
    ``CodeGenerator.generate`` and reports diagnostics, the value or the
    runtime error as an ``EvaluationResult``.
    """
    return request.param
