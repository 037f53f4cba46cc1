"""
Setup script for arena-round package with optional Cython compilation.

This builds the synchronous internal modules (world geometry, loss
evaluation, logging) as compiled extensions, while keeping the public API
(collaborators.py, runner.py, types.py, errors.py, demo_world.py) and the
asyncio lifecycle as readable Python source.
"""

from setuptools import setup, find_packages, Extension
import glob
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
    path
    for pattern in (
        "src/arena_round/_world/*.py",
        "src/arena_round/_shared/logging_config.py",
    )
    for path in sorted(glob.glob(pattern))
    if not path.endswith("__init__.py")
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        if os.path.exists(module_path):
            # Convert path to module name: src/arena_round/_world/bounds.py -> arena_round._world.bounds
            module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
            extensions.append(
                Extension(
                    name=module_name,
                    sources=[module_path],
                )
            )
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={
            "language_level": "3",
            "boundscheck": False,
            "wraparound": False,
        },
        nthreads=os.cpu_count() or 1,
    )


# Only add ext_modules if we have Cython
ext_modules = get_ext_modules() if USE_CYTHON else []

setup(
    name="arena-round",
    version="1.0.0",
    description="Authoritative round controller for team elimination game servers",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=ext_modules,
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.23",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.23",
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "arena-round=arena_round.cli:main",
        ],
    },
    # Include compiled .so/.pyd files in the package
    package_data={
        "arena_round": ["*.so", "*.pyd", "_world/*.so", "_shared/*.so"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: AsyncIO",
        "Topic :: Games/Entertainment",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Cython",
    ],
)
