from .pipeline import VariationStack, build_variation_stack
from .protocol import VariationContext, VariationStep
from .steps import variation_registry

__all__ = ["VariationContext", "VariationStep", "VariationStack", "build_variation_stack", "variation_registry"]
