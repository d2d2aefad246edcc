from .factory import BrdfFactory
from .ggx import BrdfGGX
from .beckmann import BrdfBeckmann
from .disney_diffuse import BrdfDisneyDiffuse

# Register available BRDFs
BrdfFactory.register("ggx", BrdfGGX)
BrdfFactory.register("beckmann", BrdfBeckmann)
BrdfFactory.register("disney_diffuse", BrdfDisneyDiffuse)
