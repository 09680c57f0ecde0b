"""Container storage access: paths, identity maps and external commands."""
