"""
Validation of one address against its resolved rule hierarchy.

The checks run in a single pass once the supplier has produced the
hierarchy:

- unexpected fields: filled in but absent from the country format
- missing required fields: listed in the country ``require`` string
- unknown values: a sub-region the parent rule does not list
- postal code: full match of the country pattern, then a prefix match
  against the deepest sub-region that has a pattern
- P.O. boxes: street address lines matching a P.O. box pattern

Only problems accepted by the filter are reported; an absent or empty
filter accepts everything.
"""

from typing import Optional

from .enums import AddressField, AddressProblem
from .format_rules import format_contains_field
from .lookup_key import HIERARCHY, LookupKey
from .models import AddressData, FieldProblemMap
from .post_box_matchers import get_matchers
from .rule import Rule
from .supplier import RuleHierarchy, Supplier


# COUNTRY is never unexpected
UNEXPECTED_FIELD_CANDIDATES: tuple[AddressField, ...] = (
    AddressField.ADMIN_AREA,
    AddressField.LOCALITY,
    AddressField.DEPENDENT_LOCALITY,
    AddressField.SORTING_CODE,
    AddressField.POSTAL_CODE,
    AddressField.STREET_ADDRESS,
    AddressField.RECIPIENT,
)


def is_unexpected(rule: Rule, address_field: AddressField) -> bool:
    """A field is unexpected when the rule's format does not mention it."""
    return not format_contains_field(rule.format, address_field)


class ValidationTask:
    """Validates one address and collects its problems."""

    def __init__(
        self,
        address: AddressData,
        allow_postal: bool = False,
        require_name: bool = False,
        filter: Optional[FieldProblemMap] = None,
        problems: Optional[FieldProblemMap] = None,
    ) -> None:
        """
        Initialize the task.

        Args:
            address: Address to validate
            allow_postal: Accept P.O. boxes in the street address
            require_name: Treat the recipient as a required field
            filter: Problems to report; None or empty reports all
            problems: Map receiving the problems; cleared before use
        """
        self._address = address
        self._allow_postal = allow_postal
        self._require_name = require_name
        self._filter = filter
        self._problems = problems if problems is not None else FieldProblemMap()
        self._lookup_key = LookupKey()

    @property
    def problems(self) -> FieldProblemMap:
        return self._problems

    @property
    def lookup_key(self) -> LookupKey:
        return self._lookup_key

    async def run(self, supplier: Supplier) -> tuple[bool, FieldProblemMap]:
        """
        Resolve the address's rules and validate against them.

        Returns:
            (success, problems); success is False if the rules could not be
            obtained, in which case no checks were run
        """
        self._problems.clear()
        self._lookup_key.from_address(self._address)
        result = await supplier.supply(self._lookup_key)
        self.validate(result.success, result.hierarchy)
        return result.success, self._problems

    def validate(self, success: bool, hierarchy: RuleHierarchy) -> None:
        """Run every check against a resolved hierarchy."""
        if not success:
            return

        if self._address.is_field_empty(AddressField.COUNTRY):
            self._report_problem_maybe(AddressField.COUNTRY, AddressProblem.MISSING_REQUIRED_FIELD)
        elif hierarchy[0] is None:
            self._report_problem_maybe(AddressField.COUNTRY, AddressProblem.UNKNOWN_VALUE)
        else:
            self.check_unexpected_field(hierarchy)
            self.check_missing_required_field(hierarchy)
            self.check_unknown_value(hierarchy)
            self.check_postal_code_format_and_value(hierarchy)
            self.check_uses_po_box(hierarchy)

    def check_unexpected_field(self, hierarchy: RuleHierarchy) -> None:
        country_rule = hierarchy[0]
        for address_field in UNEXPECTED_FIELD_CANDIDATES:
            if not self._address.is_field_empty(address_field) and is_unexpected(country_rule, address_field):
                self._report_problem_maybe(address_field, AddressProblem.UNEXPECTED_FIELD)

    def check_missing_required_field(self, hierarchy: RuleHierarchy) -> None:
        country_rule = hierarchy[0]
        for address_field in country_rule.required:
            if self._address.is_field_empty(address_field):
                self._report_problem_maybe(address_field, AddressProblem.MISSING_REQUIRED_FIELD)

        if self._require_name and self._address.is_field_empty(AddressField.RECIPIENT):
            self._report_problem_maybe(AddressField.RECIPIENT, AddressProblem.MISSING_REQUIRED_FIELD)

    def check_unknown_value(self, hierarchy: RuleHierarchy) -> None:
        for depth in range(1, len(HIERARCHY)):
            address_field = HIERARCHY[depth]
            parent = hierarchy[depth - 1]
            if (
                not self._address.is_field_empty(address_field)
                and parent is not None
                and parent.sub_keys
                and hierarchy[depth] is None
            ):
                self._report_problem_maybe(address_field, AddressProblem.UNKNOWN_VALUE)

    def check_postal_code_format_and_value(self, hierarchy: RuleHierarchy) -> None:
        country_rule = hierarchy[0]

        if not (
            self._should_report(AddressField.POSTAL_CODE, AddressProblem.INVALID_FORMAT)
            or self._should_report(AddressField.POSTAL_CODE, AddressProblem.MISMATCHING_VALUE)
        ):
            return

        if self._address.is_field_empty(AddressField.POSTAL_CODE):
            return
        if is_unexpected(country_rule, AddressField.POSTAL_CODE):
            # Already reported as an unexpected field
            return

        postal_code = self._address.postal_code

        # The country pattern covers the whole postal code
        matcher = country_rule.postal_code_matcher
        if (
            matcher is not None
            and not matcher.fullmatch(postal_code)
            and self._should_report(AddressField.POSTAL_CODE, AddressProblem.INVALID_FORMAT)
        ):
            self._report_problem(AddressField.POSTAL_CODE, AddressProblem.INVALID_FORMAT)
            return

        if not self._should_report(AddressField.POSTAL_CODE, AddressProblem.MISMATCHING_VALUE):
            return

        # Sub-region patterns cover a prefix; only the deepest one is checked
        for depth in range(len(HIERARCHY) - 1, 0, -1):
            rule = hierarchy[depth]
            if rule is None or rule.postal_code_matcher is None:
                continue
            if not rule.postal_code_matcher.match(postal_code):
                self._report_problem(AddressField.POSTAL_CODE, AddressProblem.MISMATCHING_VALUE)
            return

    def check_uses_po_box(self, hierarchy: RuleHierarchy) -> None:
        country_rule = hierarchy[0]

        if (
            self._allow_postal
            or not self._should_report(AddressField.STREET_ADDRESS, AddressProblem.USES_P_O_BOX)
            or self._address.is_field_empty(AddressField.STREET_ADDRESS)
        ):
            return

        matchers = get_matchers(country_rule)
        for line in self._address.address_line:
            for matcher in matchers:
                if matcher.search(line):
                    self._report_problem(AddressField.STREET_ADDRESS, AddressProblem.USES_P_O_BOX)
                    return

    def _report_problem(self, address_field: AddressField, problem: AddressProblem) -> None:
        self._problems.add(address_field, problem)

    def _report_problem_maybe(self, address_field: AddressField, problem: AddressProblem) -> None:
        if self._should_report(address_field, problem):
            self._report_problem(address_field, problem)

    def _should_report(self, address_field: AddressField, problem: AddressProblem) -> bool:
        return (
            self._filter is None
            or self._filter.is_empty()
            or self._filter.contains(address_field, problem)
        )
