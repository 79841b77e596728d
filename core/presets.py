DISCLAIMER = ("These calculators provide estimates for educational purposes only and are not a loan offer "
"or commitment to lend. Rates, program fees (MI/MIP, VA funding fee, USDA guarantee fee) and qualification "
"guidelines change frequently; actual terms depend on credit, property, and underwriting review. "
"Contact a licensed loan officer for a personalized quote.")

LOAN_PROGRAMS = ["Conventional", "FHA", "VA", "USDA", "Jumbo"]

# Standard assumptions shared by the calculators.
DTI_RATIO = 0.43
STANDARD_TERM_YEARS = 30
CLOSING_COST_PCT = 0.03
DSCR_CASH_SENTINEL = 999.0

# Rent vs buy ownership estimates, as annual fractions of home value.
RENT_VS_BUY = {
    "property_tax_pct": 0.012,
    "insurance_pct": 0.005,
    "maintenance_pct": 0.01,
    "rent_inflation_pct": 0.03,
    "max_horizon_years": 30,
}

# Conventional MI factors by LTV band. Values represent the annual private
# mortgage insurance percentage and can be tailored via the sidebar UI.
CONV_MI_BANDS = {">=97": 0.90, "95-97": 0.62, "90-95": 0.40, "85-90": 0.25, "80-85": 0.15, "<=80": 0.00}
FHA_TABLES = {"ufmip_pct":1.75,"annual_table":{"<=95_<=15":0.15,"<=95_>15":0.50,">95_<=15":0.40,">95_>15":0.55}}
VA_TABLE = {"first_0_5":2.15,"first_5_10":1.50,"first_10+":1.25,"subseq_0_5":3.30,"subseq_5_10":1.50,"subseq_10+":1.25}
USDA_TABLE = {"guarantee_pct":1.0,"annual_pct":0.35}

# Flat annual MI rates applied to a refinance balance when no manual figure
# is supplied.
REFI_MI_RATES = {"Conventional": 0.50, "FHA": 0.85, "VA": 0.0, "USDA": 0.35, "Jumbo": 0.0}

DSCR_TIERS = [
    (1.25, "Excellent", "Strong DSCR - likely to qualify with favorable terms"),
    (1.0, "Good", "Meets minimum DSCR requirements - should qualify"),
    (0.75, "Marginal", "Below minimum DSCR - may need larger down payment or higher rent"),
]
DSCR_FLOOR = ("Poor", "DSCR too low - property does not generate sufficient income")

