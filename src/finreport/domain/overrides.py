"""Override resolution and override rule administration."""

from typing import Iterable, Optional, Sequence

from finreport.database.base import Database
from finreport.domain.defaults import (
    DEFAULT_OVERRIDE_RULES,
    OTHER_RECEIVABLES_MERGE,
    PAID_IN_CAPITAL_MERGE,
    SOURCE_DECLARED,
    SOURCE_DEFAULT,
    SOURCE_LEGACY,
    SOURCE_OVERRIDE,
    SOURCE_SYNTHESIZED,
    LegacyMerge,
    default_label,
    synthesized_label,
)
from finreport.domain.entities import (
    Entity,
    OverrideRule,
    PreviewRow,
    RowDefinition,
    RowPreview,
    Section,
)
from finreport.domain.errors import (
    NotFoundError,
    OverrideConfigurationError,
    ValidationError,
    duplicate_override_rule,
    entity_not_found,
)
from finreport.domain.layout import SIDE_ORDER, layout_side, split_by_subsection
from finreport.domain.taxonomy import (
    DEFAULT_SEPARATOR,
    derive_prefixes,
    first_segment,
    grouping_key,
    matches_any_prefix,
    subsection_for_digit,
)
from finreport.logger import get_logger

logger = get_logger(__name__)


class OverrideResolver:
    """Resolves grouping keys into row definitions for one entity.

    Rules are loaded once per resolver, so a resolver should live for a single
    report request. Resolution never writes and never fails on bad stored
    configuration; unreadable rules behave like an empty rule set.
    """

    def __init__(self, db: Database, entity_id: int, separator: str = DEFAULT_SEPARATOR):
        """Initialize override resolver.

        Args:
            db: Database instance
            entity_id: Entity whose rules apply
            separator: Account code segment separator of the entity
        """
        self.db = db
        self.entity_id = entity_id
        self.separator = separator
        self._rules: Optional[tuple[OverrideRule, ...]] = None

    @property
    def rules(self) -> tuple[OverrideRule, ...]:
        if self._rules is None:
            self._rules = self._load_rules()
        return self._rules

    def _load_rules(self) -> tuple[OverrideRule, ...]:
        try:
            rules = self.db.get_override_rules(self.entity_id)
        except OverrideConfigurationError as e:
            logger.warning(
                "override configuration unreadable, using defaults",
                entity_id=self.entity_id,
                error=str(e),
            )
            return ()
        return tuple(rules)

    def find_rule(self, key: str, section: Section) -> Optional[OverrideRule]:
        """Return the first rule for (key, section), if any."""
        for rule in self.rules:
            if rule.grouping_key == key and rule.section == section:
                return rule
        return None

    def rules_for(self, section: Section) -> tuple[OverrideRule, ...]:
        """Rules of one side ordered by display order (stable)."""
        return tuple(
            sorted(
                (rule for rule in self.rules if rule.section == section),
                key=lambda rule: rule.display_order,
            )
        )

    def legacy_merge(self, key: str, section: Section) -> Optional[LegacyMerge]:
        """Return the legacy merge hosted by ``key``, if it applies.

        A merge only applies while neither its host key nor any absorbed key
        has an override rule.
        """
        if section == Section.ASSETS and key == OTHER_RECEIVABLES_MERGE.host_key:
            merge = OTHER_RECEIVABLES_MERGE
        elif section == Section.LIABILITIES and key == PAID_IN_CAPITAL_MERGE.host_key:
            merge = PAID_IN_CAPITAL_MERGE
        else:
            return None

        keys = (merge.host_key,) + merge.absorbed_keys
        if any(self.find_rule(k, section) is not None for k in keys):
            return None
        return merge

    def is_absorbed(self, section: Section, key: str) -> bool:
        """Return True if ``key`` is folded into a legacy merge host row."""
        return self.route_key(section, key) != key

    def route_key(self, section: Section, key: str) -> str:
        """Return the row key that accounts with grouping key ``key`` land in."""
        for merge in (OTHER_RECEIVABLES_MERGE, PAID_IN_CAPITAL_MERGE):
            if merge.section == section and key in merge.absorbed_keys:
                if self.legacy_merge(merge.host_key, section) is not None:
                    return merge.host_key
        return key

    def _key_of(self, code: str, width: int = 2) -> str:
        return grouping_key(code, width, self.separator)

    def resolve_row(
        self, key: str, section: Section, candidate_codes: Iterable[str]
    ) -> RowDefinition:
        """Resolve the row for a grouping key.

        Args:
            key: Grouping key (two characters for balance sheet rows, three
                for income statement lines)
            section: Statement side the row belongs to
            candidate_codes: Leaf account codes the row may capture

        Returns:
            RowDefinition with sorted account codes. The row is never dropped:
            without a rule, merge or default label, a label is synthesized
            from the key.
        """
        candidates = tuple(sorted(set(candidate_codes)))
        digit = key[:1] or None
        width = len(key)

        rule = self.find_rule(key, section)
        if rule is not None:
            return RowDefinition(
                label=rule.label,
                grouping_key=key,
                section=section,
                account_codes=self._apply_rule(rule, candidates),
                source=SOURCE_OVERRIDE,
                subsection_digit=digit,
            )

        merge = self.legacy_merge(key, section)
        if merge is not None:
            keys = (merge.host_key,) + merge.absorbed_keys
            return RowDefinition(
                label=merge.label,
                grouping_key=key,
                section=section,
                account_codes=tuple(c for c in candidates if self._key_of(c, width) in keys),
                source=SOURCE_LEGACY,
                subsection_digit=digit,
            )

        codes = tuple(c for c in candidates if self._key_of(c, width) == key)
        label = default_label(digit or "", key)
        if label:
            source = SOURCE_DEFAULT
        else:
            label = synthesized_label(key)
            source = SOURCE_SYNTHESIZED
        return RowDefinition(
            label=label,
            grouping_key=key,
            section=section,
            account_codes=codes,
            source=source,
            subsection_digit=digit,
        )

    def _apply_rule(self, rule: OverrideRule, candidates: tuple[str, ...]) -> tuple[str, ...]:
        if rule.prefixes:
            return tuple(c for c in candidates if matches_any_prefix(c, rule.prefixes, self.separator))

        width = len(rule.grouping_key)
        same_key = tuple(c for c in candidates if self._key_of(c, width) == rule.grouping_key)
        if same_key:
            return same_key
        # Keeps the row visible instead of empty; may pull in unrelated codes.
        logger.debug(
            "override without prefixes matched no accounts, using all candidates",
            entity_id=self.entity_id,
            grouping_key=rule.grouping_key,
            candidates=len(candidates),
        )
        return candidates

    def declared_digit(self, rule: OverrideRule) -> Optional[str]:
        """Return the subsection digit a declared rule belongs to.

        The digit comes from the first explicit prefix, else from the key.
        Rules whose digit lies outside their section yield None.
        """
        source = rule.prefixes[0] if rule.prefixes else rule.grouping_key
        digit = source[:1]
        subsection = subsection_for_digit(digit)
        if subsection is None or subsection.section != rule.section:
            return None
        return digit

    def resolve_declared_row(
        self,
        rule: OverrideRule,
        pool: Iterable[str],
        exclude: Iterable[str] = (),
    ) -> Optional[RowDefinition]:
        """Synthesize a row for a rule whose key has no accounts of its own.

        Args:
            rule: Override rule declaring the row
            pool: Full candidate pool of leaf codes
            exclude: Codes already captured by other rows

        Returns:
            RowDefinition, or None when the filtered pool is empty or the
            rule does not fit its section
        """
        digit = self.declared_digit(rule)
        if digit is None:
            logger.info(
                "override rule outside its section skipped",
                entity_id=self.entity_id,
                grouping_key=rule.grouping_key,
                section=rule.section.value,
            )
            return None

        excluded = set(exclude)
        codes = [
            c
            for c in sorted(set(pool))
            if c not in excluded and first_segment(c, self.separator)[:1] == digit
        ]
        if rule.prefixes:
            codes = [c for c in codes if matches_any_prefix(c, rule.prefixes, self.separator)]
        else:
            width = len(rule.grouping_key)
            codes = [c for c in codes if self._key_of(c, width) == rule.grouping_key]

        if not codes:
            return None
        return RowDefinition(
            label=rule.label,
            grouping_key=rule.grouping_key,
            section=rule.section,
            account_codes=tuple(codes),
            source=SOURCE_DECLARED,
            subsection_digit=digit,
        )


class OverrideService:
    """Service for administering override rules."""

    def __init__(self, db: Database):
        """Initialize override service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_entity(self, entity_id: int) -> Entity:
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))
        return entity

    def get_rules(self, entity_id: int) -> list[OverrideRule]:
        """Get the effective rule list of an entity.

        Args:
            entity_id: Entity ID

        Returns:
            Stored rules, or the default rule set when nothing usable is stored

        Raises:
            NotFoundError: If entity doesn't exist
        """
        self._require_entity(entity_id)
        try:
            rules = self.db.get_override_rules(entity_id)
        except OverrideConfigurationError as e:
            logger.warning(
                "override configuration unreadable, showing defaults",
                entity_id=entity_id,
                error=str(e),
            )
            rules = []
        return list(rules) if rules else list(DEFAULT_OVERRIDE_RULES)

    def replace_rules(self, entity_id: int, rules: Sequence[OverrideRule]) -> None:
        """Replace the whole rule set of an entity.

        Args:
            entity_id: Entity ID
            rules: New ordered rule list

        Raises:
            NotFoundError: If entity doesn't exist
            ValidationError: If a rule is incomplete or (key, section) repeats
        """
        self._require_entity(entity_id)
        validate_rules(rules)
        self.db.replace_override_rules(entity_id, list(rules))
        logger.info("override rules replaced", entity_id=entity_id, count=len(rules))

    def reset_to_defaults(self, entity_id: int) -> list[OverrideRule]:
        """Replace the stored rules with the default rule set."""
        self._require_entity(entity_id)
        self.db.replace_override_rules(entity_id, list(DEFAULT_OVERRIDE_RULES))
        logger.info("override rules reset", entity_id=entity_id)
        return list(DEFAULT_OVERRIDE_RULES)

    def preview_rows(self, entity_id: int, year: Optional[int] = None) -> RowPreview:
        """Show the row layout current rules produce, without values.

        Args:
            entity_id: Entity ID
            year: Year whose accounts are previewed. Defaults to the latest year

        Returns:
            RowPreview; year 0 with empty sides when the entity has no data

        Raises:
            NotFoundError: If entity doesn't exist
        """
        entity = self._require_entity(entity_id)
        if year is None:
            year = self.db.get_latest_year(entity_id)
        if year is None:
            return RowPreview(year=0)

        codes = {entry.account_code for entry in self.db.get_leaf_entries(entity_id, year)}
        by_subsection = split_by_subsection(codes, entity.account_code_separator)
        resolver = OverrideResolver(self.db, entity_id, entity.account_code_separator)

        sides = {}
        for section in SIDE_ORDER:
            rows = []
            for block in layout_side(resolver, section, by_subsection):
                for row in block.rows:
                    rows.append(
                        PreviewRow(
                            grouping_key=row.grouping_key,
                            label=row.label,
                            subsection=block.subsection.title,
                            account_codes=row.account_codes,
                            prefixes=derive_prefixes(row.account_codes, entity.account_code_separator),
                            source=row.source,
                        )
                    )
            sides[section] = tuple(rows)

        return RowPreview(
            year=year,
            asset_rows=sides[Section.ASSETS],
            liability_rows=sides[Section.LIABILITIES],
        )


def validate_rules(rules: Sequence[OverrideRule]) -> None:
    """Validate a rule list before it is stored.

    Raises:
        ValidationError: On a blank key or label, a blank prefix, or a repeated
            (key, section) pair
    """
    seen: set[tuple[str, Section]] = set()
    for rule in rules:
        if not rule.grouping_key or not rule.grouping_key.strip():
            raise ValidationError("Override rule grouping key cannot be empty")
        if not rule.label or not rule.label.strip():
            raise ValidationError(f"Override rule '{rule.grouping_key}' needs a label")
        if not isinstance(rule.section, Section):
            raise ValidationError(f"Override rule '{rule.grouping_key}' has no valid section")
        if any(not prefix or not prefix.strip() for prefix in rule.prefixes):
            raise ValidationError(f"Override rule '{rule.grouping_key}' has an empty prefix")
        identity = (rule.grouping_key, rule.section)
        if identity in seen:
            raise ValidationError(duplicate_override_rule(rule.grouping_key, rule.section.value))
        seen.add(identity)
