import os

import setuptools

# Make sure that README.md decodes in environments that use the C locale
# (which implies ASCII), by explicitly giving the encoding.
with open(os.path.join(os.path.dirname(__file__), "README.md"), encoding="utf-8") as f:
    long_description = f.read()


setuptools.setup(
    name="termselect",
    # MAJOR.MINOR.PATCH, per http://semver.org
    version="1.0.0",
    description="An inline, keyboard-driven single-choice selection widget for terminals",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="termselect contributors",
    keywords="terminal, tui, ansi, select, menu, prompt",
    license="ISC",
    py_modules=(
        "termselect",
        "keydecoder",
        "rawterm",
        "pickone",
    ),
    entry_points={
        "console_scripts": ("pickone = pickone:main",)
    },
    extras_require={
        "test": ("pytest",),
    },
    python_requires=">=3.6",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Environment :: Console",
        "Topic :: Terminals",
        "Topic :: Software Development :: User Interfaces",
        "License :: OSI Approved :: ISC License (ISCL)",
        "Operating System :: POSIX",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.6",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Programming Language :: Python :: Implementation :: PyPy",
    ],
)
