"""
Creative variation generation

Exploration prompts ask for something new; optimization prompts build on the
best performing creative. Both go through the text generator and the response
parser before a DRAFT creative is stored.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from adcreative.core.config import settings
from adcreative.core.time import utcnow
from adcreative.models import AdCreative, CreativeStatus, GenerationMode
from adcreative.services.response_parser import KeywordResponseParser, ParsedCreative, ResponseParser
from adcreative.services.scoring import CreativeScore
from adcreative.services.store import Store
from adcreative.services.text_generator import TextGenerator

logger = logging.getLogger(__name__)

# (max_tokens, temperature) per mode; exploration is more creative
GENERATION_PARAMS = {
    GenerationMode.EXPLORATION: (400, 0.9),
    GenerationMode.OPTIMIZATION: (500, 0.7),
}

OPTIMIZATION_TARGET = "improve_conversion_rate"


@dataclass
class ProductContext:
    """Product details embedded in generation prompts"""

    name: str = field(default_factory=lambda: settings.DEFAULT_PRODUCT_NAME)
    price: str = field(default_factory=lambda: settings.DEFAULT_PRODUCT_PRICE)
    category: str = field(default_factory=lambda: settings.DEFAULT_PRODUCT_CATEGORY)
    target_audience: str = field(default_factory=lambda: settings.DEFAULT_TARGET_AUDIENCE)


@dataclass
class PerformanceContext:
    """The proven creative an optimization builds on"""

    ad_name: str
    score: CreativeScore


@dataclass
class VariationResult:
    creative: AdCreative
    mode: GenerationMode
    generated_content: ParsedCreative
    original_ad: Optional[str] = None
    original_score: Optional[float] = None


def build_exploration_prompt(product: ProductContext) -> str:
    return f"""
Generate a new ad creative variation for our e-commerce product:

Product: {product.name}
Price: {product.price}
Category: {product.category}
Target Audience: {product.target_audience}

Mode: Exploration - Try something new and creative

Generate:
1. Ad Headline (max 40 characters)
2. Ad Copy (max 125 characters)
3. Call-to-Action button text
4. Visual direction suggestions
5. Target audience refinements
6. A/B testing hypothesis

Make it compelling, conversion-focused, and suitable for Facebook/Instagram ads.
""".strip()


def build_optimization_prompt(product: ProductContext, context: Optional[PerformanceContext] = None) -> str:
    if context is None:
        performance_block = "Build on what works in proven e-commerce ads for this product."
    else:
        score = context.score
        performance_block = (
            f"Current Ad: {context.ad_name}\n"
            f"Performance Score: {score.score:.2f}\n"
            f"CTR: {score.avg_ctr:.2f}%\n"
            f"CPC: ${score.avg_cpc:.2f}\n"
            f"Conversions: {score.total_conversions}"
        )
    return f"""
Optimize this high-performing ad creative based on performance data:

{performance_block}

Product: {product.name}
Price: {product.price}
Category: {product.category}
Target Audience: {product.target_audience}

Mode: Optimization - Improve on what works

Generate an optimized version that:
1. Maintains what's working well
2. Improves weak areas
3. Tests new elements
4. Increases conversion potential

Generate:
1. Optimized Headline
2. Optimized Ad Copy
3. Improved Call-to-Action
4. Visual improvements
5. Target audience refinements
6. A/B testing hypothesis

Make it even more compelling while building on proven success.
""".strip()


class VariationGenerator:
    """Builds a prompt, generates text, parses it and stores a DRAFT creative"""

    def __init__(
        self,
        store: Store,
        text_generator: TextGenerator,
        parser: Optional[ResponseParser] = None,
        model: Optional[str] = None,
    ):
        self.store = store
        self.text_generator = text_generator
        self.parser = parser or KeywordResponseParser()
        self.model = model or settings.TEXT_GENERATION_MODEL

    def generate(
        self,
        ad_set_id: str,
        mode: GenerationMode = GenerationMode.EXPLORATION,
        context: Optional[PerformanceContext] = None,
        product: Optional[ProductContext] = None,
    ) -> VariationResult:
        mode = GenerationMode(mode)
        product = product or ProductContext()

        if mode == GenerationMode.OPTIMIZATION:
            prompt = build_optimization_prompt(product, context)
        else:
            prompt = build_exploration_prompt(product)

        max_tokens, temperature = GENERATION_PARAMS[mode]
        response = self.text_generator.generate(
            prompt,
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        parsed = self.parser.parse(response.text)

        performance_data = None
        if context is not None:
            performance_data = {
                "original_ad": context.ad_name,
                "original_score": context.score.score,
                "optimization_target": OPTIMIZATION_TARGET,
            }

        creative = self.store.create_creative(
            ad_set_id=ad_set_id,
            headline=parsed.headline,
            ad_copy=parsed.ad_copy,
            call_to_action=parsed.call_to_action,
            visual_direction=parsed.visual_direction,
            target_audience=parsed.target_audience,
            hypothesis=parsed.hypothesis,
            mode=mode,
            status=CreativeStatus.DRAFT,
            performance_data=performance_data,
            generated_at=utcnow(),
        )
        logger.info(f"[VariationGenerator] Stored {mode.value} creative {creative.id} for ad set {ad_set_id}")

        return VariationResult(
            creative=creative,
            mode=mode,
            generated_content=parsed,
            original_ad=context.ad_name if context else None,
            original_score=context.score.score if context else None,
        )
