"""
Services for the plugin-ci pipeline.

- jobs: per-stage job folders and stats
- packaging: dist merging, manifest stamping, archives
- testing: end-to-end result collection against a deployed instance
- report: build report assembly
- history: branch/PR aware history store
- stages: the fixed pipeline stages built from the above
"""
