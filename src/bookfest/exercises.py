"""Guided exercises: learners edit a keyword list and compare against a model answer."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Tuple

import numpy as np
import pandas as pd

from .config import GENDER_TERMS, RACE_TERMS, RESIDUAL_BLOCKLIST
from .metrics import Tokens, keyword_predicate, keyword_share


@dataclass(frozen=True)
class Exercise:
    name: str
    prompt: str
    hint: str
    solution_terms: FrozenSet[str]


@dataclass
class ExerciseResult:
    exercise: str
    passed: bool
    missing_terms: Tuple[str, ...]
    extra_terms: Tuple[str, ...]
    learner: pd.DataFrame = field(repr=False)
    solution: pd.DataFrame = field(repr=False)


EXERCISES: Dict[str, Exercise] = {
    "gender": Exercise(
        name="gender",
        prompt="List words that signal gender-related events, then chart their yearly share.",
        hint="Start with 'women' and 'feminism'; look for words about harassment and sexism too.",
        solution_terms=GENDER_TERMS,
    ),
    "race": Exercise(
        name="race",
        prompt="Swap the gender keywords for race-related ones and chart their yearly share.",
        hint="Three words are enough: one noun and two words built on it.",
        solution_terms=RACE_TERMS,
    ),
}


def _norm_terms(terms: Iterable[str]) -> FrozenSet[str]:
    return frozenset(t.strip().lower() for t in (terms or ()) if t and t.strip())


def check_exercise(
    exercise: Exercise,
    learner_terms: Iterable[str],
    tokens: Tokens,
    blocklist: Iterable[str] = RESIDUAL_BLOCKLIST,
) -> ExerciseResult:
    """
    Run the learner's terms and the model answer over the same tokens.
    Passes when every year's share matches, even if the term lists differ.
    """
    if not isinstance(tokens, pd.DataFrame):
        tokens = pd.DataFrame(list(tokens), columns=["year", "word"])
    mine = _norm_terms(learner_terms)
    theirs = _norm_terms(exercise.solution_terms)

    learner = keyword_share(tokens, keyword_predicate(mine), blocklist=blocklist)
    solution = keyword_share(tokens, keyword_predicate(theirs), blocklist=blocklist)

    passed = (
        learner["year"].tolist() == solution["year"].tolist()
        and np.allclose(learner["share"].to_numpy(), solution["share"].to_numpy())
    )
    return ExerciseResult(
        exercise=exercise.name,
        passed=bool(passed),
        missing_terms=tuple(sorted(theirs - mine)),
        extra_terms=tuple(sorted(mine - theirs)),
        learner=learner,
        solution=solution,
    )
