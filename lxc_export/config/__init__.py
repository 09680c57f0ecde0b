"""Configuration loading for lxc-export."""
