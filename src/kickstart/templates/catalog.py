"""Built-in template catalog."""

from kickstart.detection.models import Framework
from kickstart.templates.base import TemplateConfig

TEMPLATE_IDS: tuple[str, ...] = (
    "nextjs-ecommerce",
    "nextjs-saas",
    "express-api",
)

NEXTJS_ECOMMERCE = TemplateConfig(
    id="nextjs-ecommerce",
    name="Next.js E-commerce",
    description="Full-featured online store with product catalog and checkout",
    framework="Next.js 14 (App Router)",
    framework_variant=Framework.NEXTJS_APP,
    features=(
        "Product catalog page",
        "Shopping cart",
        "Checkout with ZendFi",
        "Order confirmation",
        "Webhook handler",
        "Admin dashboard (embedded)",
    ),
    requires_auth=False,
)

NEXTJS_SAAS = TemplateConfig(
    id="nextjs-saas",
    name="Next.js SaaS",
    description="Subscription-based SaaS application",
    framework="Next.js 14 (App Router)",
    framework_variant=Framework.NEXTJS_APP,
    features=(
        "Subscription plans page",
        "User authentication",
        "Customer portal",
        "Webhook handler",
        "Usage tracking",
        "Payment history",
    ),
    requires_auth=True,
)

EXPRESS_API = TemplateConfig(
    id="express-api",
    name="Express API",
    description="Backend API with payment endpoints",
    framework="Express.js",
    framework_variant=Framework.EXPRESS,
    features=(
        "Payment creation endpoint",
        "Webhook handler",
        "CORS configuration",
        "Environment setup",
        "TypeScript support",
    ),
    requires_auth=False,
)

BUILTIN_TEMPLATES: tuple[TemplateConfig, ...] = (
    NEXTJS_ECOMMERCE,
    NEXTJS_SAAS,
    EXPRESS_API,
)
