from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Set

from reactsmells.core.config import ConfigError
from reactsmells.rules.base import Rule
from reactsmells.rules.composition.cp001_duplicated_jsx import CP001
from reactsmells.rules.composition.cp002_duplicated_jsx_across_files import CP002
from reactsmells.rules.composition.cp003_oversized_component import CP003
from reactsmells.rules.composition.cp004_higher_order_component import CP004
from reactsmells.rules.dom.dm001_direct_dom_manipulation import DM001
from reactsmells.rules.hooks.hk001_extract_custom_hook import HK001
from reactsmells.rules.lifecycle.lc001_force_update import LC001
from reactsmells.rules.lifecycle.lc002_legacy_lifecycle import LC002
from reactsmells.rules.props.pr001_unused_props import PR001
from reactsmells.rules.state.st001_props_in_initial_state import ST001
from reactsmells.rules.syntax.sx001_parse_error import SX001

PARSE_ERROR_ID = SX001.rule_id


class RuleRegistry:

    def __init__(self, rules: Sequence[Rule], catalogue: Optional[Sequence[Rule]] = None):
        ids = [r.rule_id for r in rules]
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        if dupes:
            raise ValueError(f"Duplicate rule ids: {', '.join(dupes)}")
        self.rules: List[Rule] = list(rules)
        # selectors always resolve against the full catalogue, even after select/ignore
        self.catalogue: List[Rule] = list(catalogue) if catalogue is not None else list(rules)
        self._by_id: Dict[str, Rule] = {r.rule_id: r for r in self.rules}

    @staticmethod
    def default():

        rules = [
            SX001(),
            ST001(),
            LC001(),
            LC002(),
            DM001(),
            PR001(),
            HK001(),
            CP001(),
            CP002(),
            CP003(),
            CP004(),
        ]

        return RuleRegistry(rules)

    def __iter__(self):
        return iter(self.rules)

    def __len__(self):
        return len(self.rules)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._by_id

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._by_id.get(rule_id)

    @property
    def project_rules(self) -> List[Rule]:
        return [r for r in self.rules if r.scope == "project"]

    def resolve(self, selector: str, strict: bool = False) -> Set[str]:
        """
        Map a selector to rule ids. Accepted forms:
          ST001            exact rule id
          props-in-initial-state   rule name
          ST               rule id prefix
          state            category
          ALL              every rule
        """
        token = selector.strip()
        if not token:
            return set()
        upper = token.upper()
        lower = token.lower()

        if upper == "ALL":
            return {r.rule_id for r in self.catalogue}

        exact = {r.rule_id for r in self.catalogue if r.rule_id == upper or r.name == lower}
        if exact:
            return exact

        matched = {
            r.rule_id
            for r in self.catalogue
            if (upper.isalpha() and r.rule_id.startswith(upper)) or r.category == lower
        }
        if not matched and strict:
            raise ConfigError(f"Unknown rule selector: {selector}")
        return matched

    def select(self, select: Iterable[str] = (), ignore: Iterable[str] = ()) -> "RuleRegistry":
        select = list(select)
        chosen: Set[str] = set()
        if select:
            for s in select:
                chosen |= self.resolve(s, strict=True)
        else:
            chosen = {r.rule_id for r in self.rules}
        for s in ignore:
            chosen -= self.resolve(s, strict=True)

        return RuleRegistry([r for r in self.rules if r.rule_id in chosen], catalogue=self.catalogue)
