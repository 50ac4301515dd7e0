#Marks providers as a package.
#Re-exports the public pieces of the external provider integration
#(eligibility filter, HTTP client, adapter) so other modules import from
#providers without knowing internal file names.
#No fare logic here.

from .eligibility import EligibilityFilter
from .namma_yatri_client import NammaYatriClient, NammaYatriError
from .namma_yatri_adapter import NammaYatriAdapter

__all__ = [
    "EligibilityFilter",
    "NammaYatriClient",
    "NammaYatriError",
    "NammaYatriAdapter",
]
