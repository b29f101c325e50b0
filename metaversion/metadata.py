__project__ = "meta-version"
__version__ = "260205.0.0"
