"""外部检索源（PubMed / DrugBank）与补充上下文合成。"""

from di_assistant.lookups.drug_reference import DrugBankLookup, DrugLinkExtractor, RegexDrugLinkExtractor
from di_assistant.lookups.literature import PubMedLookup
from di_assistant.lookups.synthesizer import ContextSynthesizer

__all__ = [
    "ContextSynthesizer",
    "DrugBankLookup",
    "DrugLinkExtractor",
    "PubMedLookup",
    "RegexDrugLinkExtractor",
]
