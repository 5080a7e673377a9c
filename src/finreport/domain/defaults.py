"""Static classification tables.

Plain immutable lookups; all behaviour lives in the resolver and the
statement services.
"""

from dataclasses import dataclass
from types import MappingProxyType

from finreport.domain.entities import OverrideRule, Section

# (subsection digit) -> grouping key -> default row label
DEFAULT_ROW_LABELS = MappingProxyType(
    {
        "1": MappingProxyType(
            {
                "10": "Cash and Cash Equivalents",
                "11": "Marketable Securities",
                "12": "Trade Receivables",
                "13": "Other Receivables",
                "15": "Inventories",
                "17": "Construction in Progress",
                "18": "Prepaid Expenses",
                "19": "Other Current Assets",
            }
        ),
        "2": MappingProxyType(
            {
                "22": "Long-Term Trade Receivables",
                "23": "Other Long-Term Receivables",
                "24": "Long-Term Financial Investments",
                "25": "Property, Plant and Equipment",
                "26": "Intangible Assets",
                "27": "Depletable Assets",
                "28": "Long-Term Prepaid Expenses",
                "29": "Deferred Taxes",
            }
        ),
        "3": MappingProxyType(
            {
                "30": "Financial Borrowings",
                "32": "Trade Payables",
                "33": "Other Payables",
                "34": "Advances Received",
                "35": "Construction Progress Billings",
                "36": "Taxes and Funds Payable",
                "37": "Provisions",
                "38": "Deferred Income",
                "39": "Other Liabilities",
            }
        ),
        "4": MappingProxyType(
            {
                "40": "Financial Borrowings",
                "42": "Trade Payables",
                "43": "Other Payables",
                "44": "Advances Received",
                "47": "Provisions",
                "48": "Other Provisions",
            }
        ),
        "5": MappingProxyType(
            {
                "50": "Paid-in Capital",
                "52": "Capital Reserves",
                "54": "Profit Reserves",
                "58": "Special Funds",
            }
        ),
        "6": MappingProxyType(
            {
                "600": "Domestic Sales",
                "601": "Export Sales",
                "602": "Other Revenue",
                "610": "Sales Returns (-)",
                "611": "Sales Discounts (-)",
                "612": "Other Sales Deductions (-)",
                "620": "Cost of Goods Manufactured Sold (-)",
                "621": "Cost of Merchandise Sold (-)",
                "622": "Cost of Services Sold (-)",
                "623": "Cost of Other Sales (-)",
                "630": "Research and Development Expenses (-)",
                "631": "Marketing, Selling and Distribution Expenses (-)",
                "632": "General Administrative Expenses (-)",
                "640": "Dividend Income from Affiliates",
                "641": "Dividend Income from Subsidiaries",
                "642": "Interest Income",
                "643": "Commission Income",
                "644": "Provisions No Longer Required",
                "645": "Gains on Sale of Securities",
                "646": "Foreign Exchange Gains",
                "647": "Rediscount Interest Income",
                "648": "Inflation Adjustment Gains",
                "649": "Other Ordinary Income and Gains",
                "653": "Commission Expenses (-)",
                "654": "Provision Expenses (-)",
                "655": "Losses on Sale of Securities (-)",
                "656": "Foreign Exchange Losses (-)",
                "657": "Rediscount Interest Expenses (-)",
                "658": "Inflation Adjustment Losses (-)",
                "659": "Other Ordinary Expenses and Losses (-)",
                "660": "Short-Term Borrowing Expenses (-)",
                "661": "Long-Term Borrowing Expenses (-)",
                "671": "Prior Period Income and Gains",
                "679": "Other Extraordinary Income and Gains",
                "680": "Idle Capacity Expenses and Losses (-)",
                "681": "Prior Period Expenses and Losses (-)",
                "689": "Other Extraordinary Expenses and Losses (-)",
                "691": "Tax and Other Legal Liability Provisions (-)",
            }
        ),
    }
)


@dataclass(frozen=True)
class LegacyMerge:
    """Fixed reporting convention folding an adjacent group into a host row."""

    section: Section
    host_key: str
    label: str
    absorbed_keys: tuple[str, ...]


# The two merges of the statutory layout. They are one-off exceptions and
# are matched by explicit branches in the resolver; do not add more.
OTHER_RECEIVABLES_MERGE = LegacyMerge(
    section=Section.ASSETS,
    host_key="13",
    label="Other Receivables",
    absorbed_keys=("14",),
)
PAID_IN_CAPITAL_MERGE = LegacyMerge(
    section=Section.LIABILITIES,
    host_key="50",
    label="Paid-in Capital",
    absorbed_keys=("51",),
)

UNMAPPED_LABEL = "Unmapped Accounts"


def synthesized_label(key: str) -> str:
    """Label for a grouping key with no default and no override."""
    return f"NOT {key}"


_DEFAULT_RULE_ROWS = (
    # non-current assets
    ("22", Section.ASSETS, "Long-Term Trade Receivables", 1),
    ("23", Section.ASSETS, "Other Long-Term Receivables", 2),
    ("24", Section.ASSETS, "Long-Term Financial Investments", 3),
    ("25", Section.ASSETS, "Property, Plant and Equipment", 4),
    ("26", Section.ASSETS, "Intangible Assets", 5),
    ("27", Section.ASSETS, "Depletable Assets", 6),
    ("28", Section.ASSETS, "Long-Term Prepaid Expenses", 7),
    ("29", Section.ASSETS, "Deferred Taxes", 8),
    # current assets
    ("10", Section.ASSETS, "Cash and Cash Equivalents", 9),
    ("11", Section.ASSETS, "Marketable Securities", 10),
    ("12", Section.ASSETS, "Trade Receivables", 11),
    ("13", Section.ASSETS, "Other Receivables", 12),
    ("15", Section.ASSETS, "Inventories", 14),
    ("16", Section.ASSETS, "Short-Term Finance Lease Receivables", 15),
    ("17", Section.ASSETS, "Construction in Progress", 16),
    ("18", Section.ASSETS, "Prepaid Expenses", 17),
    ("19", Section.ASSETS, "Other Current Assets", 18),
    # equity
    ("50", Section.LIABILITIES, "Paid-in Capital", 1),
    ("52", Section.LIABILITIES, "Capital Reserves", 2),
    ("54", Section.LIABILITIES, "Profit Reserves", 3),
    ("57", Section.LIABILITIES, "Retained Earnings (+)", 4),
    ("58", Section.LIABILITIES, "Accumulated Losses (-)", 5),
    ("59", Section.LIABILITIES, "Net Profit/(Loss) for the Period", 6),
    # long-term liabilities
    ("40", Section.LIABILITIES, "Borrowings LT", 7),
    ("41", Section.LIABILITIES, "Trade Payables LT", 8),
    ("42", Section.LIABILITIES, "Lease Liabilities LT", 9),
    ("43", Section.LIABILITIES, "Other Payables LT", 10),
    ("44", Section.LIABILITIES, "Advances Received LT", 11),
    ("47", Section.LIABILITIES, "Provisions LT", 12),
    ("48", Section.LIABILITIES, "Other Provisions LT", 13),
    ("49", Section.LIABILITIES, "Other Liabilities LT", 14),
    # current liabilities
    ("30", Section.LIABILITIES, "Borrowings ST", 15),
    ("32", Section.LIABILITIES, "Trade Payables ST", 16),
    ("33", Section.LIABILITIES, "Other Payables ST", 17),
    ("34", Section.LIABILITIES, "Advances Received ST", 18),
    ("35", Section.LIABILITIES, "Construction Progress Billings ST", 19),
    ("36", Section.LIABILITIES, "Taxes and Funds Payable ST", 20),
    ("37", Section.LIABILITIES, "Provisions ST", 21),
    ("38", Section.LIABILITIES, "Deferred Income ST", 22),
    ("39", Section.LIABILITIES, "Other Liabilities ST", 23),
)

DEFAULT_OVERRIDE_RULES = tuple(
    OverrideRule(
        grouping_key=key,
        section=section,
        label=label,
        display_order=order,
        prefixes=(key,),
    )
    for key, section, label, order in _DEFAULT_RULE_ROWS
)


def default_label(digit: str, key: str) -> str:
    """Return the default label for ``key`` or an empty string."""
    return DEFAULT_ROW_LABELS.get(digit, {}).get(key, "")


# RowDefinition.source values
SOURCE_OVERRIDE = "override"
SOURCE_LEGACY = "legacy"
SOURCE_DEFAULT = "default"
SOURCE_SYNTHESIZED = "synthesized"
SOURCE_DECLARED = "declared"
SOURCE_UNMAPPED = "unmapped"
