"""Project presets.

A preset contributes a set of domain features (expanded by the resolver
through :func:`~blueprint.scaffolder.features.build_feature_descriptors`)
and a few extra packages.  The base bundle already owns the ``home``
feature, so no preset lists it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from blueprint.config import ProjectPreset
from blueprint.scaffolder.bundle import TemplateBundle


@dataclass(frozen=True)
class PresetDefinition:
    title: str
    description: str
    features: tuple[str, ...] = ()
    dependencies: dict[str, str] = field(default_factory=dict)


PRESETS: dict[ProjectPreset, PresetDefinition] = {
    ProjectPreset.BLANK: PresetDefinition(
        title="Blank Project",
        description="Basic architecture with a single home feature",
    ),
    ProjectPreset.ECOMMERCE: PresetDefinition(
        title="E-Commerce App",
        description="Product catalog, shopping cart, checkout, and payment integration",
        features=("products", "cart", "checkout", "orders", "auth", "search"),
        dependencies={"badges": "^3.1.0", "cached_network_image": "^3.3.0", "shimmer": "^3.0.0"},
    ),
    ProjectPreset.SOCIAL_MEDIA: PresetDefinition(
        title="Social Media App",
        description="User profiles, posts feed, comments, likes, and social interactions",
        features=("auth", "profile", "posts", "comments", "likes", "feed"),
        dependencies={"cached_network_image": "^3.3.0", "image_picker": "^1.0.0", "timeago": "^3.5.0"},
    ),
    ProjectPreset.FITNESS_TRACKER: PresetDefinition(
        title="Fitness Tracker",
        description="Workout tracking, progress charts, goal setting, and statistics",
        features=("workouts", "exercises", "progress", "goals", "statistics", "calendar"),
        dependencies={"fl_chart": "^0.65.0", "intl": "^0.19.0", "table_calendar": "^3.0.9"},
    ),
    ProjectPreset.FINANCE_APP: PresetDefinition(
        title="Finance App",
        description="Transaction management, budgets, spending analytics, and reports",
        features=("transactions", "categories", "budgets", "analytics", "reports"),
        dependencies={"currency_formatter": "^2.2.0", "fl_chart": "^0.65.0", "intl": "^0.19.0"},
    ),
    ProjectPreset.FOOD_DELIVERY: PresetDefinition(
        title="Food Delivery App",
        description="Restaurant browsing, menu ordering, cart, and delivery tracking",
        features=("restaurants", "menu", "cart", "orders", "tracking", "auth"),
        dependencies={"badges": "^3.1.0", "cached_network_image": "^3.3.0", "flutter_rating_bar": "^4.0.1"},
    ),
    ProjectPreset.CHAT_APP: PresetDefinition(
        title="Chat App",
        description="Real-time messaging, user presence, media sharing, and notifications",
        features=("auth", "chats", "messages", "contacts", "media", "notifications"),
        dependencies={
            "badges": "^3.1.0",
            "file_picker": "^6.0.0",
            "image_picker": "^1.0.0",
            "timeago": "^3.5.0",
        },
    ),
}


def preset_definition(preset: ProjectPreset) -> PresetDefinition:
    return PRESETS[preset]


def build_preset_bundle(preset: ProjectPreset) -> TemplateBundle:
    """Bundle carrying the preset's required features and extra packages."""
    definition = PRESETS[preset]
    return TemplateBundle(
        name=f"preset:{preset.value}",
        dependencies=dict(definition.dependencies),
        required_features=frozenset(definition.features),
    )
