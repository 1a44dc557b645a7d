#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Constants for structopt
"""

# Field metadata key holding the flag name
TAG_KEY = "opt"

# Field metadata key holding the flag help text
HELP_KEY = "help"

# Characters in a flag name that become ENV_SEP in the environment variable name
FLAG_SEPS = ".-"

ENV_SEP = "_"

# Dotenv files layered around the process environment
ENV_FILE = ".env"
ENV_LOCAL_FILE = ".env.local"
