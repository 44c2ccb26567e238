"""Curated drug-drug interaction table.

Each entry names two drugs (or drug classes) and the clinically significant
interaction between them. Drug names are lowercase generic names; a
patient's medication matches an entry member when the names are equal or
one contains the other (so "warfarin sodium" matches "warfarin").

Entries are listed by therapeutic area. When several entries could match
the same pair, exact name matches beat containment matches, then higher
severity wins, then the earlier entry.
"""

from typing import Any

KNOWN_INTERACTIONS: list[dict[str, Any]] = [
    # --- Anticoagulation and bleeding risk ---
    {
        "drugs": ("aspirin", "warfarin"),
        "severity": "major",
        "mechanism": "Additive anticoagulant/antiplatelet effects",
        "effect": "Significantly increased bleeding risk",
        "management": "Avoid combination or monitor very closely; frequent INR checks",
        "evidence_level": "A",
        "sources": ("Clinical literature", "FDA guidelines"),
    },
    {
        "drugs": ("warfarin", "amiodarone"),
        "severity": "major",
        "mechanism": "CYP2C9 inhibition increases warfarin exposure",
        "effect": "Significantly increased bleeding risk",
        "management": "Reduce warfarin dose by 25-50%; monitor INR closely",
        "evidence_level": "A",
        "sources": ("Cardiology guidelines", "FDA"),
    },
    {
        "drugs": ("warfarin", "fluconazole"),
        "severity": "major",
        "mechanism": "CYP2C9 inhibition",
        "effect": "Increased anticoagulation effect",
        "management": "Monitor INR daily; consider dose reduction",
        "evidence_level": "A",
        "sources": ("Clinical pharmacology",),
    },
    {
        "drugs": ("warfarin", "trimethoprim-sulfamethoxazole"),
        "severity": "major",
        "mechanism": "CYP2C9 inhibition and protein binding displacement",
        "effect": "Increased bleeding risk",
        "management": "Monitor INR frequently; adjust warfarin dose",
        "evidence_level": "A",
        "sources": ("Clinical studies",),
    },
    {
        "drugs": ("dabigatran", "rifampin"),
        "severity": "major",
        "mechanism": "P-glycoprotein induction reduces dabigatran exposure",
        "effect": "Reduced anticoagulant efficacy",
        "management": "Avoid combination; use alternative anticoagulant",
        "evidence_level": "B",
        "sources": ("FDA label",),
    },
    {
        "drugs": ("rivaroxaban", "ketoconazole"),
        "severity": "major",
        "mechanism": "CYP3A4 and P-glycoprotein inhibition",
        "effect": "Increased bleeding risk",
        "management": "Avoid combination; monitor for bleeding signs",
        "evidence_level": "A",
        "sources": ("FDA warnings",),
    },
    # --- Oncology ---
    {
        "drugs": ("bevacizumab", "sunitinib"),
        "severity": "major",
        "mechanism": "Additive anti-angiogenic effects",
        "effect": "Severe hypertension and arterial thromboembolism",
        "management": "Avoid combination; monitor blood pressure closely if unavoidable",
        "evidence_level": "A",
        "sources": ("FDA warnings", "Oncology guidelines"),
    },
    {
        "drugs": ("trastuzumab", "anthracyclines"),
        "severity": "major",
        "mechanism": "Additive cardiotoxicity",
        "effect": "Cardiomyopathy and heart failure risk",
        "management": "Avoid concurrent use; monitor cardiac function if sequential therapy",
        "evidence_level": "A",
        "sources": ("FDA black box warning", "Cardio-oncology guidelines"),
    },
    {
        "drugs": ("tamoxifen", "paroxetine"),
        "severity": "major",
        "mechanism": "Strong CYP2D6 inhibition reduces formation of active metabolite (endoxifen)",
        "effect": "Reduced efficacy of tamoxifen therapy",
        "management": "Avoid potent CYP2D6 inhibitors; consider alternatives (venlafaxine)",
        "evidence_level": "B",
        "sources": ("Breast cancer guidelines",),
    },
    {
        "drugs": ("tamoxifen", "fluoxetine"),
        "severity": "major",
        "mechanism": "CYP2D6 inhibition reduces active metabolite formation",
        "effect": "Decreased breast cancer survival",
        "management": "Switch to non-CYP2D6 inhibiting antidepressant",
        "evidence_level": "A",
        "sources": ("Breast cancer guidelines",),
    },
    {
        "drugs": ("imatinib", "ketoconazole"),
        "severity": "major",
        "mechanism": "CYP3A4 inhibition increases imatinib exposure",
        "effect": "Severe myelosuppression and hepatotoxicity",
        "management": "Reduce imatinib dose by 25-50%; monitor closely",
        "evidence_level": "A",
        "sources": ("FDA", "Clinical pharmacology"),
    },
    {
        "drugs": ("erlotinib", "rifampin"),
        "severity": "major",
        "mechanism": "CYP3A4 induction reduces erlotinib levels",
        "effect": "Loss of therapeutic efficacy",
        "management": "Increase erlotinib dose or avoid rifampin",
        "evidence_level": "A",
        "sources": ("Oncology guidelines",),
    },
    {
        "drugs": ("capecitabine", "warfarin"),
        "severity": "major",
        "mechanism": "Enhanced anticoagulant effect via CYP2C9",
        "effect": "Severe bleeding and elevated INR",
        "management": "Monitor INR frequently; adjust warfarin dose",
        "evidence_level": "A",
        "sources": ("FDA", "Oncology literature"),
    },
    {
        "drugs": ("sorafenib", "warfarin"),
        "severity": "major",
        "mechanism": "Enhanced anticoagulation via CYP2C9 inhibition",
        "effect": "Increased bleeding risk",
        "management": "Monitor INR frequently; consider dose adjustment",
        "evidence_level": "B",
        "sources": ("FDA label", "Clinical studies"),
    },
    {
        "drugs": ("methotrexate", "trimethoprim-sulfamethoxazole"),
        "severity": "major",
        "mechanism": "Reduced folate metabolism and renal clearance",
        "effect": "Severe bone marrow toxicity",
        "management": "Avoid combination; use alternative antibiotic",
        "evidence_level": "A",
        "sources": ("Rheumatology guidelines",),
    },
    {
        "drugs": ("methotrexate", "probenecid"),
        "severity": "major",
        "mechanism": "Reduced renal clearance of methotrexate",
        "effect": "Severe methotrexate toxicity",
        "management": "Avoid combination; monitor methotrexate levels",
        "evidence_level": "A",
        "sources": ("Oncology guidelines",),
    },
    {
        "drugs": ("pemetrexed", "nsaids"),
        "severity": "major",
        "mechanism": "Reduced renal clearance of pemetrexed",
        "effect": "Severe myelosuppression and mucositis",
        "management": "Avoid NSAIDs 2 days before through 2 days after pemetrexed",
        "evidence_level": "A",
        "sources": ("FDA label", "Oncology guidelines"),
    },
    {
        "drugs": ("docetaxel", "ketoconazole"),
        "severity": "major",
        "mechanism": "CYP3A4 inhibition increases docetaxel exposure",
        "effect": "Severe neutropenia and toxicity",
        "management": "Avoid strong CYP3A4 inhibitors during treatment",
        "evidence_level": "B",
        "sources": ("FDA label",),
    },
    {
        "drugs": ("paclitaxel", "carboplatin"),
        "severity": "moderate",
        "mechanism": "Sequence-dependent interaction",
        "effect": "Enhanced myelosuppression if carboplatin given first",
        "management": "Administer paclitaxel before carboplatin",
        "evidence_level": "A",
        "sources": ("Clinical trials",),
    },
    {
        "drugs": ("cisplatin", "gentamicin"),
        "severity": "major",
        "mechanism": "Additive nephrotoxicity and ototoxicity",
        "effect": "Kidney damage and hearing loss",
        "management": "Monitor renal function and audiometry",
        "evidence_level": "A",
        "sources": ("Oncology guidelines",),
    },
    {
        "drugs": ("bleomycin", "oxygen"),
        "severity": "major",
        "mechanism": "Enhanced pulmonary toxicity",
        "effect": "Severe pneumonitis",
        "management": "Minimize oxygen concentration during surgery",
        "evidence_level": "A",
        "sources": ("Anesthesiology guidelines",),
    },
    # --- Pain management and opioids ---
    {
        "drugs": ("oxycodone", "ketoconazole"),
        "severity": "major",
        "mechanism": "CYP3A4 inhibition increases oxycodone exposure",
        "effect": "Enhanced sedation and respiratory depression",
        "management": "Avoid or reduce oxycodone dose; monitor closely",
        "evidence_level": "B",
        "sources": ("FDA",),
    },
    {
        "drugs": ("fentanyl", "clarithromycin"),
        "severity": "major",
        "mechanism": "CYP3A4 inhibition increases fentanyl levels",
        "effect": "Risk of fatal respiratory depression",
        "management": "Avoid combination; consider alternative antibiotic",
        "evidence_level": "A",
        "sources": ("FDA",),
    },
    {
        "drugs": ("methadone", "amiodarone"),
        "severity": "major",
        "mechanism": "Additive QT prolongation",
        "effect": "Torsades de pointes risk",
        "management": "Avoid combination; ECG monitoring if unavoidable",
        "evidence_level": "B",
        "sources": ("Cardiology guidelines",),
    },
    {
        "drugs": ("tramadol", "sertraline"),
        "severity": "major",
        "mechanism": "Serotonin syndrome risk",
        "effect": "Hyperthermia, altered mental status, neuromuscular abnormalities",
        "management": "Avoid combination; use alternative analgesic",
        "evidence_level": "B",
        "sources": ("FDA warnings", "Pain management guidelines"),
    },
    {
        "drugs": ("tramadol", "fluoxetine"),
        "severity": "major",
        "mechanism": "Serotonergic toxicity risk; CYP2D6 inhibition reduces analgesia",
        "effect": "Serotonin syndrome; decreased tramadol effectiveness",
        "management": "Avoid combination; consider non-serotonergic analgesic",
        "evidence_level": "B",
        "sources": ("FDA warnings",),
    },
    {
        "drugs": ("morphine", "gabapentin"),
        "severity": "moderate",
        "mechanism": "Additive CNS depressant effects",
        "effect": "Enhanced sedation and respiratory depression",
        "management": "Start with lower doses; monitor closely",
        "evidence_level": "C",
        "sources": ("Pain management literature",),
    },
    {
        "drugs": ("fentanyl", "rifampin"),
        "severity": "major",
        "mechanism": "CYP3A4 induction reduces fentanyl exposure",
        "effect": "Loss of analgesic efficacy",
        "management": "Avoid rifampin or increase fentanyl dose significantly",
        "evidence_level": "B",
        "sources": ("Anesthesiology studies",),
    },
    # --- Cardiovascular ---
    {
        "drugs": ("digoxin", "amiodarone"),
        "severity": "major",
        "mechanism": "P-glycoprotein inhibition increases digoxin levels",
        "effect": "Digoxin toxicity risk",
        "management": "Reduce digoxin dose by 50%; monitor levels closely",
        "evidence_level": "A",
        "sources": ("Cardiovascular pharmacology",),
    },
    {
        "drugs": ("digoxin", "quinidine"),
        "severity": "major",
        "mechanism": "P-glycoprotein inhibition and displacement",
        "effect": "Severe digoxin toxicity in elderly",
        "management": "Reduce digoxin dose by 50%; monitor levels",
        "evidence_level": "A",
        "sources": ("Geriatric cardiology",),
    },
    {
        "drugs": ("amiodarone", "simvastatin"),
        "severity": "major",
        "mechanism": "CYP3A4 inhibition increases simvastatin exposure",
        "effect": "Myopathy and rhabdomyolysis risk",
        "management": "Limit simvastatin to 20mg daily; consider pravastatin",
        "evidence_level": "A",
        "sources": ("ACC/AHA guidelines",),
    },
    {
        "drugs": ("verapamil", "digoxin"),
        "severity": "moderate",
        "mechanism": "P-glycoprotein inhibition increases digoxin levels",
        "effect": "Digoxin toxicity",
        "management": "Reduce digoxin dose by 25%; monitor levels",
        "evidence_level": "A",
        "sources": ("Cardiology references",),
    },
    {
        "drugs": ("amlodipine", "simvastatin"),
        "severity": "moderate",
        "mechanism": "CYP3A4 inhibition increases statin exposure",
        "effect": "Myopathy risk",
        "management": "Limit simvastatin to 20mg daily",
        "evidence_level": "A",
        "sources": ("FDA recommendations",),
    },
    {
        "drugs": ("diltiazem", "metoprolol"),
        "severity": "moderate",
        "mechanism": "Additive negative chronotropic effects",
        "effect": "Bradycardia and heart block risk",
        "management": "Monitor heart rate and conduction; dose reduction may be needed",
        "evidence_level": "B",
        "sources": ("Clinical experience",),
    },
    {
        "drugs": ("enalapril", "spironolactone"),
        "severity": "moderate",
        "mechanism": "Additive hyperkalemic effects",
        "effect": "Hyperkalemia risk",
        "management": "Monitor serum potassium regularly",
        "evidence_level": "A",
        "sources": ("Nephrology guidelines",),
    },
    {
        "drugs": ("lisinopril", "potassium supplements"),
        "severity": "moderate",
        "mechanism": "Additive hyperkalemic effects",
        "effect": "Hyperkalemia risk",
        "management": "Monitor serum potassium levels regularly",
        "evidence_level": "A",
        "sources": ("Cardiology guidelines",),
    },
    # --- Neuropsychiatric ---
    {
        "drugs": ("fluoxetine", "tramadol"),
        "severity": "major",
        "mechanism": "Serotonin syndrome risk",
        "effect": "Hyperthermia, rigidity, altered consciousness",
        "management": "Avoid combination; consider alternative antidepressant or analgesic",
        "evidence_level": "A",
        "sources": ("FDA warnings",),
    },
    {
        "drugs": ("lithium", "hydrochlorothiazide"),
        "severity": "major",
        "mechanism": "Reduced lithium clearance",
        "effect": "Lithium toxicity risk",
        "management": "Monitor lithium levels frequently; adjust dose as needed",
        "evidence_level": "A",
        "sources": ("Psychiatry guidelines",),
    },
    {
        "drugs": ("phenytoin", "carbamazepine"),
        "severity": "moderate",
        "mechanism": "Mutual CYP3A4 induction",
        "effect": "Reduced efficacy of both anticonvulsants",
        "management": "Monitor seizure control; may need dose adjustments",
        "evidence_level": "B",
        "sources": ("Neurology guidelines",),
    },
    {
        "drugs": ("carbamazepine", "oral contraceptives"),
        "severity": "moderate",
        "mechanism": "CYP3A4 induction reduces contraceptive efficacy",
        "effect": "Risk of unintended pregnancy",
        "management": "Use additional contraceptive methods",
        "evidence_level": "A",
        "sources": ("Reproductive health guidelines",),
    },
    {
        "drugs": ("valproic acid", "lamotrigine"),
        "severity": "moderate",
        "mechanism": "Inhibition of lamotrigine glucuronidation",
        "effect": "Lamotrigine toxicity including serious rash",
        "management": "Start lamotrigine at lower dose; titrate slowly",
        "evidence_level": "A",
        "sources": ("Epilepsy guidelines",),
    },
    {
        "drugs": ("clozapine", "ciprofloxacin"),
        "severity": "major",
        "mechanism": "CYP1A2 inhibition increases clozapine levels",
        "effect": "Increased risk of seizures and agranulocytosis",
        "management": "Monitor clozapine levels and CBC; reduce dose",
        "evidence_level": "A",
        "sources": ("Psychiatry guidelines",),
    },
    # --- Antimicrobials ---
    {
        "drugs": ("theophylline", "ciprofloxacin"),
        "severity": "major",
        "mechanism": "CYP1A2 inhibition reduces theophylline clearance",
        "effect": "Theophylline toxicity with seizures possible",
        "management": "Avoid combination or reduce theophylline dose significantly",
        "evidence_level": "A",
        "sources": ("FDA", "Clinical studies"),
    },
    {
        "drugs": ("warfarin", "ciprofloxacin"),
        "severity": "moderate",
        "mechanism": "CYP1A2/3A4 inhibition increases warfarin exposure",
        "effect": "Increased INR and bleeding risk",
        "management": "Monitor INR closely; adjust warfarin dose if needed",
        "evidence_level": "B",
        "sources": ("Clinical studies",),
    },
    {
        "drugs": ("rifampin", "oral contraceptives"),
        "severity": "major",
        "mechanism": "CYP3A4 induction reduces contraceptive efficacy",
        "effect": "High risk of unintended pregnancy",
        "management": "Use alternative contraceptive methods during treatment",
        "evidence_level": "A",
        "sources": ("TB treatment guidelines",),
    },
    {
        "drugs": ("azithromycin", "warfarin"),
        "severity": "moderate",
        "mechanism": "Enhanced anticoagulation effect",
        "effect": "Increased bleeding risk",
        "management": "Monitor INR more frequently during antibiotic course",
        "evidence_level": "B",
        "sources": ("Clinical studies",),
    },
    {
        "drugs": ("vancomycin", "furosemide"),
        "severity": "moderate",
        "mechanism": "Additive nephrotoxicity",
        "effect": "Increased kidney damage risk",
        "management": "Monitor renal function closely",
        "evidence_level": "B",
        "sources": ("Nephrology literature",),
    },
    # --- Diabetes and endocrine ---
    {
        "drugs": ("metformin", "contrast media"),
        "severity": "major",
        "mechanism": "Risk of lactic acidosis with renal impairment",
        "effect": "Potentially fatal lactic acidosis",
        "management": "Hold metformin 48h before and after contrast administration",
        "evidence_level": "A",
        "sources": ("Radiology guidelines", "FDA"),
    },
    {
        "drugs": ("metformin", "cimetidine"),
        "severity": "moderate",
        "mechanism": "Reduced renal clearance of metformin",
        "effect": "Risk of lactic acidosis",
        "management": "Monitor renal function; consider alternative H2 blocker",
        "evidence_level": "B",
        "sources": ("Endocrinology guidelines",),
    },
    {
        "drugs": ("glyburide", "fluconazole"),
        "severity": "moderate",
        "mechanism": "CYP2C9 inhibition increases glyburide exposure",
        "effect": "Severe hypoglycemia risk",
        "management": "Monitor blood glucose closely; reduce glyburide dose",
        "evidence_level": "B",
        "sources": ("Diabetes management guidelines",),
    },
    {
        "drugs": ("insulin", "atenolol"),
        "severity": "moderate",
        "mechanism": "Beta-blocker masks hypoglycemia symptoms",
        "effect": "Unrecognized hypoglycemia",
        "management": "Monitor blood glucose frequently; patient education",
        "evidence_level": "B",
        "sources": ("Diabetes guidelines",),
    },
    {
        "drugs": ("levothyroxine", "calcium carbonate"),
        "severity": "moderate",
        "mechanism": "Chelation reduces levothyroxine absorption",
        "effect": "Hypothyroidism",
        "management": "Separate administration by 4 hours",
        "evidence_level": "A",
        "sources": ("Endocrinology guidelines",),
    },
    # --- Immunosuppressants ---
    {
        "drugs": ("tacrolimus", "fluconazole"),
        "severity": "major",
        "mechanism": "CYP3A4 inhibition increases tacrolimus exposure",
        "effect": "Nephrotoxicity and immunosuppression",
        "management": "Monitor tacrolimus levels; reduce dose significantly",
        "evidence_level": "A",
        "sources": ("Transplant guidelines",),
    },
    {
        "drugs": ("cyclosporine", "simvastatin"),
        "severity": "major",
        "mechanism": "Increased statin exposure via CYP3A4 inhibition",
        "effect": "Severe myopathy and rhabdomyolysis",
        "management": "Avoid combination; use pravastatin if statin needed",
        "evidence_level": "A",
        "sources": ("Transplant guidelines",),
    },
    {
        "drugs": ("tacrolimus", "diltiazem"),
        "severity": "moderate",
        "mechanism": "CYP3A4 inhibition increases tacrolimus levels",
        "effect": "Enhanced immunosuppression and nephrotoxicity",
        "management": "Monitor tacrolimus levels; reduce dose",
        "evidence_level": "A",
        "sources": ("Transplant guidelines",),
    },
    # --- General medicine ---
    {
        "drugs": ("simvastatin", "gemfibrozil"),
        "severity": "major",
        "mechanism": "Inhibition of simvastatin glucuronidation",
        "effect": "Severe myopathy and rhabdomyolysis risk",
        "management": "Avoid combination; use alternative statin if needed",
        "evidence_level": "A",
        "sources": ("FDA warning",),
    },
    {
        "drugs": ("colchicine", "clarithromycin"),
        "severity": "major",
        "mechanism": "CYP3A4 and P-glycoprotein inhibition",
        "effect": "Colchicine toxicity with organ failure",
        "management": "Reduce colchicine dose significantly or avoid",
        "evidence_level": "A",
        "sources": ("FDA warnings",),
    },
    {
        "drugs": ("sildenafil", "nitroglycerin"),
        "severity": "major",
        "mechanism": "Additive vasodilation",
        "effect": "Severe hypotension and cardiovascular collapse",
        "management": "Absolute contraindication; avoid combination",
        "evidence_level": "A",
        "sources": ("FDA black box warning",),
    },
    {
        "drugs": ("allopurinol", "azathioprine"),
        "severity": "major",
        "mechanism": "Inhibition of azathioprine metabolism",
        "effect": "Severe bone marrow suppression",
        "management": "Reduce azathioprine dose by 75%; monitor blood counts",
        "evidence_level": "A",
        "sources": ("Rheumatology guidelines",),
    },
]
