"""rpmsync - reconcile RPM-staged Puppet modules with the environment tree."""

__version__ = "0.1.0"
