"""sarifix: SARIF findings to solver fixes to one pull request per file."""

from sarifix._version import __version__
from sarifix.fix.aggregator import PatchAggregator
from sarifix.fix.diff import DiffEngine
from sarifix.fix.engine import FixEngine
from sarifix.fix.requester import FixRequester
from sarifix.sarif.rules import RuleCatalog

__all__ = [
    "__version__",
    "DiffEngine",
    "FixEngine",
    "FixRequester",
    "PatchAggregator",
    "RuleCatalog",
]
