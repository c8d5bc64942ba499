"""Binding of fixations to the words and lines of a text layout."""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..config.constants import ComputationalConstants
from ..domain.gaze import Fixation
from ..domain.reading import FixationTextBinding
from ..domain.text import TextLayoutResult, TextWord
from ..layout.engine import distance_to_word, find_line_at

logger = logging.getLogger(__name__)


def nearest_word(layout: TextLayoutResult, x: float, y: float) -> Tuple[Optional[TextWord], float]:
    """
    Word nearest to ``(x, y)`` by box distance (0 inside the box).

    This is the distance to the word rectangle, not to the word centre, so
    a long word wins over a short neighbour whose centre is closer.
    Centre distance only breaks ties.

    Equal box distances, e.g. a point inside two overlapping boxes, go to
    the word whose centre is nearer, then to the lower word index.
    """
    best: Optional[TextWord] = None
    best_key = (math.inf, math.inf)
    for word in layout.words:
        key = (
            distance_to_word(x, y, word),
            math.hypot(x - word.center_x, y - word.center_y),
        )
        if key < best_key:
            best_key = key
            best = word
    return best, best_key[0]


def bind_fixations_to_text(
    fixations: Sequence[Fixation],
    layout: TextLayoutResult,
    max_distance_px: float = ComputationalConstants.DEFAULT_MAX_FIXATION_DISTANCE_PX,
    corrected: Optional[Sequence[Fixation]] = None,
) -> List[FixationTextBinding]:
    """
    Assign each fixation to at most one word.

    A fixation within ``max_distance_px`` of its nearest word box binds to
    that word and its line. Otherwise ``word_index`` stays ``None`` and the
    line comes from :func:`find_line_at`.

    Args:
        fixations: Fixations in reading order.
        layout: Text layout to bind against.
        max_distance_px: Cutoff on the word box distance.
        corrected: Drift corrected copies of ``fixations`` (same length),
            used for the lookup. Bindings keep the original fixation.

    Returns:
        One binding per fixation, ``sequence_index`` = input position.
    """
    if corrected is not None and len(corrected) != len(fixations):
        raise ValueError(
            f"corrected has {len(corrected)} fixations, expected {len(fixations)}"
        )
    lookup = corrected if corrected is not None else fixations

    bindings: List[FixationTextBinding] = []
    for i, (fix, pos) in enumerate(zip(fixations, lookup)):
        word, dist = nearest_word(layout, pos.x_px, pos.y_px)
        if word is not None and dist <= max_distance_px:
            word_index: Optional[int] = word.index
            line_index: Optional[int] = word.line_index
        else:
            word_index = None
            line = find_line_at(layout, pos.y_px)
            line_index = line.index if line is not None else None

        bindings.append(
            FixationTextBinding(
                fixation=fix,
                sequence_index=i,
                word_index=word_index,
                line_index=line_index,
                distance_to_word=dist,
                corrected_y_px=pos.y_px,
            )
        )

    logger.debug(
        "Bound %s/%s fixations to words",
        sum(1 for b in bindings if b.word_index is not None),
        len(bindings),
    )
    return bindings
