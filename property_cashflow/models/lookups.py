"""Lookup tables for stamp duty, registration fees, and state defaults."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class Jurisdiction(str, Enum):
    """Australian state or territory whose rules apply to the purchase."""

    NSW = "NSW"
    VIC = "VIC"
    QLD = "QLD"
    SA = "SA"
    WA = "WA"
    TAS = "TAS"
    ACT = "ACT"
    NT = "NT"

    @classmethod
    def parse(cls, code) -> Optional["Jurisdiction"]:
        """Resolve a state code, ignoring case and surrounding whitespace.

        Returns None for anything that is not one of the eight codes.
        """
        if isinstance(code, Jurisdiction):
            return code
        if code is None:
            return None
        try:
            return cls(str(code).strip().upper())
        except ValueError:
            return None


class DutyScheme(Enum):
    """Shape of the stamp duty formula used by a jurisdiction."""

    MARGINAL = "marginal"  # base + (price - prev_bound) x rate
    PER_HUNDRED = "per_hundred"  # base + ceil(excess / 100) x dollars per $100
    TOTAL_RATE = "total_rate"  # single rate applied to the whole price
    FLAT = "flat"  # unknown region approximation


@dataclass(frozen=True)
class DutyBracket:
    """One band of a progressive stamp duty schedule.

    base_amount is the duty accumulated up to the previous bracket's bound.
    For PER_HUNDRED schemes marginal_rate is dollars per $100 of excess.
    """

    upper_bound: float
    base_amount: float
    marginal_rate: float


@dataclass(frozen=True)
class RegistrationFees:
    """Land titles office fees lodged at settlement."""

    transfer_fee: float
    mortgage_registration_fee: float


@dataclass(frozen=True)
class JurisdictionRates:
    """Everything the cashflow engine looks up per jurisdiction."""

    code: str
    duty_scheme: DutyScheme
    duty_brackets: Tuple[DutyBracket, ...]
    landlord_insurance: float  # Annual default premium
    management_fee_pct: float  # Share of annual rent
    registration_fees: RegistrationFees
    minimum_duty: float = 0.0
    is_fallback: bool = False


_OPEN = math.inf

# General (investor) transfer duty schedules
NSW_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(17_000, 0.0, 0.0125),
    DutyBracket(36_000, 212.50, 0.015),
    DutyBracket(97_000, 497.50, 0.0175),
    DutyBracket(364_000, 1_565.00, 0.035),
    DutyBracket(1_214_000, 10_910.00, 0.045),
    DutyBracket(_OPEN, 49_160.00, 0.055),
)

VIC_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(25_000, 0.0, 0.014),
    DutyBracket(130_000, 350.00, 0.024),
    DutyBracket(960_000, 2_870.00, 0.06),
    DutyBracket(2_000_000, 52_670.00, 0.055),
    DutyBracket(_OPEN, 109_870.00, 0.065),
)

QLD_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(5_000, 0.0, 0.0),
    DutyBracket(75_000, 0.0, 0.015),
    DutyBracket(540_000, 1_050.00, 0.035),
    DutyBracket(1_000_000, 17_325.00, 0.045),
    DutyBracket(_OPEN, 38_025.00, 0.0575),
)

SA_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(12_000, 0.0, 0.01),
    DutyBracket(30_000, 120.00, 0.02),
    DutyBracket(50_000, 480.00, 0.03),
    DutyBracket(100_000, 1_080.00, 0.035),
    DutyBracket(200_000, 2_830.00, 0.04),
    DutyBracket(250_000, 6_830.00, 0.0425),
    DutyBracket(300_000, 8_955.00, 0.0475),
    DutyBracket(500_000, 11_330.00, 0.05),
    DutyBracket(_OPEN, 21_330.00, 0.055),
)

WA_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(120_000, 0.0, 0.019),
    DutyBracket(150_000, 2_280.00, 0.0285),
    DutyBracket(360_000, 3_135.00, 0.038),
    DutyBracket(725_000, 11_115.00, 0.0475),
    DutyBracket(_OPEN, 28_452.50, 0.0515),
)

# First band is a flat $50 regardless of price
TAS_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(3_000, 50.00, 0.0),
    DutyBracket(25_000, 50.00, 0.0175),
    DutyBracket(75_000, 435.00, 0.0225),
    DutyBracket(200_000, 1_560.00, 0.035),
    DutyBracket(375_000, 5_935.00, 0.04),
    DutyBracket(725_000, 12_935.00, 0.0425),
    DutyBracket(_OPEN, 27_810.00, 0.045),
)

# Dollars per $100 (or part thereof) of the excess over the previous bound
ACT_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(200_000, 0.0, 1.20),
    DutyBracket(300_000, 2_400.00, 2.20),
    DutyBracket(500_000, 4_600.00, 3.40),
    DutyBracket(750_000, 11_400.00, 4.32),
    DutyBracket(1_000_000, 22_200.00, 5.90),
    DutyBracket(_OPEN, 36_950.00, 6.40),
)

# Above the quadratic threshold a single rate applies to the whole price.
# base_amount is unused for TOTAL_RATE schedules.
NT_QUADRATIC_THRESHOLD = 525_000.0
NT_QUADRATIC_COEFFICIENT = 0.06571441
NT_LINEAR_COEFFICIENT = 15.0
NT_DUTY_BRACKETS: Tuple[DutyBracket, ...] = (
    DutyBracket(3_000_000, 0.0, 0.0495),
    DutyBracket(5_000_000, 0.0, 0.0575),
    DutyBracket(_OPEN, 0.0, 0.0595),
)

FALLBACK_DUTY_RATE = 0.04
FALLBACK_REGISTRATION_FEES = RegistrationFees(transfer_fee=200.00, mortgage_registration_fee=200.00)

# Unknown codes borrow this jurisdiction's insurance and management defaults
FALLBACK_JURISDICTION = Jurisdiction.NSW


_RATES = {
    Jurisdiction.NSW: JurisdictionRates(
        code="NSW",
        duty_scheme=DutyScheme.MARGINAL,
        duty_brackets=NSW_DUTY_BRACKETS,
        landlord_insurance=450.0,
        management_fee_pct=0.055,
        registration_fees=RegistrationFees(165.40, 165.40),
        minimum_duty=20.0,
    ),
    Jurisdiction.VIC: JurisdictionRates(
        code="VIC",
        duty_scheme=DutyScheme.MARGINAL,
        duty_brackets=VIC_DUTY_BRACKETS,
        landlord_insurance=420.0,
        management_fee_pct=0.06,
        registration_fees=RegistrationFees(1_478.00, 135.70),
    ),
    Jurisdiction.QLD: JurisdictionRates(
        code="QLD",
        duty_scheme=DutyScheme.MARGINAL,
        duty_brackets=QLD_DUTY_BRACKETS,
        landlord_insurance=480.0,
        management_fee_pct=0.075,
        registration_fees=RegistrationFees(2_108.00, 238.30),
    ),
    Jurisdiction.SA: JurisdictionRates(
        code="SA",
        duty_scheme=DutyScheme.MARGINAL,
        duty_brackets=SA_DUTY_BRACKETS,
        landlord_insurance=400.0,
        management_fee_pct=0.07,
        registration_fees=RegistrationFees(3_359.00, 198.00),
    ),
    Jurisdiction.WA: JurisdictionRates(
        code="WA",
        duty_scheme=DutyScheme.MARGINAL,
        duty_brackets=WA_DUTY_BRACKETS,
        landlord_insurance=430.0,
        management_fee_pct=0.085,
        registration_fees=RegistrationFees(1_104.00, 210.60),
    ),
    Jurisdiction.TAS: JurisdictionRates(
        code="TAS",
        duty_scheme=DutyScheme.MARGINAL,
        duty_brackets=TAS_DUTY_BRACKETS,
        landlord_insurance=380.0,
        management_fee_pct=0.075,
        registration_fees=RegistrationFees(250.13, 162.68),
    ),
    Jurisdiction.ACT: JurisdictionRates(
        code="ACT",
        duty_scheme=DutyScheme.PER_HUNDRED,
        duty_brackets=ACT_DUTY_BRACKETS,
        landlord_insurance=420.0,
        management_fee_pct=0.066,
        registration_fees=RegistrationFees(470.00, 172.00),
    ),
    Jurisdiction.NT: JurisdictionRates(
        code="NT",
        duty_scheme=DutyScheme.TOTAL_RATE,
        duty_brackets=NT_DUTY_BRACKETS,
        landlord_insurance=520.0,
        management_fee_pct=0.077,
        registration_fees=RegistrationFees(177.00, 177.00),
    ),
}

JURISDICTION_RATES: Mapping[Jurisdiction, JurisdictionRates] = MappingProxyType(_RATES)

UNKNOWN_REGION_RATES = JurisdictionRates(
    code="UNKNOWN",
    duty_scheme=DutyScheme.FLAT,
    duty_brackets=(DutyBracket(_OPEN, 0.0, FALLBACK_DUTY_RATE),),
    landlord_insurance=_RATES[FALLBACK_JURISDICTION].landlord_insurance,
    management_fee_pct=_RATES[FALLBACK_JURISDICTION].management_fee_pct,
    registration_fees=FALLBACK_REGISTRATION_FEES,
    is_fallback=True,
)


def get_jurisdiction_rates(code) -> JurisdictionRates:
    """Get the rate tables for a jurisdiction.

    Args:
        code: Jurisdiction enum member or state code string (e.g., "nsw").

    Returns:
        JurisdictionRates for the code, or UNKNOWN_REGION_RATES when the
        code is not recognised.
    """
    jurisdiction = Jurisdiction.parse(code)
    if jurisdiction is None:
        logger.debug("Unknown jurisdiction %r, using unknown region rates", code)
        return UNKNOWN_REGION_RATES
    return JURISDICTION_RATES[jurisdiction]
