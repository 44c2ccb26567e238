"""Drug categories and risk weights.

Category members are lowercase name fragments. A drug belongs to a
category when its normalized name contains one of the fragments, so
"morphine sulfate" is an opioid and "alprazolam (benzodiazepine)" is a CNS
depressant.
"""

# Drug categories with special monitoring requirements
DRUG_CATEGORIES: dict[str, tuple[str, ...]] = {
    "anticoagulants": ("warfarin", "dabigatran", "rivaroxaban", "apixaban"),
    "opioids": ("morphine", "oxycodone", "fentanyl", "tramadol", "codeine"),
    "chemotherapy": ("methotrexate", "cisplatin", "doxorubicin", "paclitaxel"),
    "immunosuppressants": ("tacrolimus", "cyclosporine", "mycophenolate"),
    "antiarrhythmics": ("amiodarone", "quinidine", "procainamide"),
    "qt_prolonging": ("ondansetron", "haloperidol", "methadone"),
    "cns_depressants": ("benzodiazepine", "alcohol", "barbiturate", "muscle relaxant"),
    "cyp3a4_inhibitors": ("ketoconazole", "clarithromycin", "grapefruit"),
    "cyp3a4_substrates": ("simvastatin", "atorvastatin", "midazolam", "cyclosporine"),
}

# Risk multipliers. Each bracket table is ordered from the most to the least
# severe bracket; the scorer applies only the first one that matches.
AGE_WEIGHTS: tuple[tuple[int, float, str], ...] = (
    (85, 2.5, "Advanced age (>85)"),
    (75, 2.0, "Advanced age (>75)"),
    (65, 1.5, "Elderly (>65)"),
)

POLYPHARMACY_WEIGHTS: tuple[tuple[int, float, str], ...] = (
    (15, 2.2, "Extreme polypharmacy (>15 drugs)"),
    (10, 1.8, "High polypharmacy (>10 drugs)"),
    (5, 1.3, "Polypharmacy (>5 drugs)"),
)

# Mild impairment carries a weight in the table but is not penalized by the
# scorer; only moderate and severe impairment are.
RENAL_WEIGHTS: dict[str, float] = {"mild": 1.2, "moderate": 1.8, "severe": 3.0}
HEPATIC_WEIGHTS: dict[str, float] = {"mild": 1.3, "moderate": 2.0, "severe": 3.5}

# Interaction load: risk *= 1 + MAJOR * majors + MODERATE * moderates
MAJOR_INTERACTION_WEIGHT = 0.5
MODERATE_INTERACTION_WEIGHT = 0.2

# Score thresholds, checked from the top down (score >= threshold)
RISK_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (3.0, "critical"),
    (2.0, "high"),
    (1.5, "moderate"),
)
