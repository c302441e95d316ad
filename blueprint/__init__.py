"""blueprint -- scaffolds Flutter application source trees.

Quick usage::

    from blueprint.config import BlueprintConfig
    from blueprint.scaffolder import ProjectGenerator

    config = BlueprintConfig(app_name="shop", state_management="riverpod")
    result = ProjectGenerator().generate(config, "/tmp/shop")
"""

__version__ = "0.3.0"
