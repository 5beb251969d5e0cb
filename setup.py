"""
Setup script for the marrakech package with optional Cython compilation.

This builds the internal rule-engine modules as compiled extensions when
Cython is installed, while keeping the public API (errors.py, types.py,
cli.py) and the session layer as readable Python source.
"""

from setuptools import setup, find_packages, Extension
import os

# Check if Cython is available
try:
    from Cython.Build import cythonize
    USE_CYTHON = True
except ImportError:
    USE_CYTHON = False
    print("Cython not found. Building without compilation (source only).")

# Internal modules to compile with Cython
CYTHON_MODULES = [
    "src/marrakech/_engine/board.py",
    "src/marrakech/_engine/territory.py",
    "src/marrakech/_engine/placement.py",
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        if os.path.exists(module_path):
            # src/marrakech/_engine/foo.py -> marrakech._engine.foo
            module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
            extensions.append(Extension(name=module_name, sources=[module_path]))
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={"language_level": "3", "annotation_typing": False},
        nthreads=os.cpu_count() or 1,
    )


setup(
    name="marrakech-engine",
    version="1.0.0",
    description="Rule engine and session orchestrator for the Marrakech board game",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=get_ext_modules() if USE_CYTHON else [],
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
        "dev": [
            "pytest>=7.4",
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "marrakech=marrakech.cli:main",
        ],
    },
    package_data={
        "marrakech": ["*.so", "*.pyd"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: Games/Entertainment :: Board Games",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
