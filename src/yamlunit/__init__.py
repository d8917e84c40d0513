"""yamlunit: compile YAML REST test specs into Python test modules."""

__version__ = "0.1.0"
