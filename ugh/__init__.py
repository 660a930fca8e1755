"""
ugh

Turns uncommitted git changes into a Jira ticket and a matching branch.
"""

__version__ = "0.1.0"

# Centralized branch types - single source of truth
# Used by: prompts/builder.py, llm/base.py (validation), git/branch.py, drafts/heuristic.py
BRANCH_TYPES = {
    'feature': 'New capability or behavior',
    'fix': 'A bug fix',
    'quality': 'Refactoring, cleanup, tests, docs or tooling',
}

BRANCH_TYPE_NAMES = list(BRANCH_TYPES.keys())

DEFAULT_BRANCH_TYPE = 'feature'
