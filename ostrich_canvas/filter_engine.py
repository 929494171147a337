"""
FilterEngine - applies filter specifications to the sales rows.
The master list is never modified; every call returns a new view.
"""

import logging
import uuid
from typing import Dict, List

from .models import Row

logger = logging.getLogger(__name__)

MATCH_MODES = ('equals', 'prefix')


def make_filter(field: str, condition, filter_type: str = 'include',
                match: str = 'equals', description: str = None) -> Dict:
    """
    Build a filter spec.

    Args:
        field: Row attribute to test (e.g. 'region')
        condition: A value, or a list of values (any one matching is enough)
        filter_type: 'include' keeps matching rows, 'exclude' drops them
        match: 'equals' or 'prefix'; comparison is case-insensitive and trimmed
        description: Human-readable description for the history panel

    Returns:
        Filter spec dict with a fresh 'id' and 'enabled' set
    """
    if filter_type not in ('include', 'exclude'):
        raise ValueError(f"Invalid filter_type: {filter_type}")
    if match not in MATCH_MODES:
        raise ValueError(f"Invalid match mode: {match}")
    return {
        'id': str(uuid.uuid4()),
        'field': field,
        'condition': condition,
        'filter_type': filter_type,
        'match': match,
        'description': description or f"{filter_type} {field} {match} {condition}",
        'enabled': True,
    }


class FilterEngine:
    """
    Executes filter specs against rows. Stateless: the filter stack lives in
    DashboardState, the engine only knows how to evaluate it.

    Usage:
        engine = FilterEngine()
        view = engine.apply(state.rows, state.filters)
    """

    def apply(self, rows: List[Row], filters: List[Dict]) -> List[Row]:
        """
        Apply all enabled filters to rows, in order.

        Returns:
            Filtered list (a new list; rows themselves are shared, being immutable)
        """
        items = list(rows)
        for filter_spec in filters:
            if not filter_spec.get('enabled', True):
                continue
            items = self._apply_single(items, filter_spec)
        return items

    def _apply_single(self, items: List[Row], filter_spec: Dict) -> List[Row]:
        field = filter_spec['field']
        filter_type = filter_spec['filter_type']
        match = filter_spec.get('match', 'equals')
        condition = filter_spec['condition']
        wanted = condition if isinstance(condition, (list, tuple)) else [condition]
        wanted = [self._norm(w) for w in wanted]

        result = []
        for item in items:
            value = getattr(item, field, None)
            if value is None:
                logger.debug("Row %s has no field %r", item.id, field)
                matches = False
            else:
                value = self._norm(value)
                if match == 'prefix':
                    matches = any(value.startswith(w) for w in wanted)
                else:
                    matches = value in wanted
            if filter_type == 'include' and matches:
                result.append(item)
            elif filter_type == 'exclude' and not matches:
                result.append(item)
        return result

    @staticmethod
    def _norm(value) -> str:
        return str(value).strip().lower()
