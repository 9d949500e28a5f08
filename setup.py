#!/usr/bin/env python3
from __future__ import annotations

import re
import setuptools
import pathlib
import sys
import toml

__minver__ = '3.8'
__github__ = 'https://github.com/streamsplit/streamsplit/'
__gitraw__ = 'https://raw.githubusercontent.com/streamsplit/streamsplit/'
__author__ = 'streamsplit contributors'
__slogan__ = 'Split byte streams into records at regular expression matches without loading them into memory.'
__topics__ = [
    'Development Status :: 3 - Alpha',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Text Processing',
    'Topic :: Utilities',
]


def get_config():
    here = pathlib.Path(__file__).parent.absolute()
    sys.path.insert(0, str(here))

    import streamsplit

    def get_setup_readme(filename: str | pathlib.Path | None = None):
        if filename is None:
            filename = here.joinpath('README.md')
        try:
            README = open(filename, 'r', encoding='UTF8')
        except FileNotFoundError:
            return __slogan__
        with README:
            def complete_link(match):
                link: str = match[1]
                if any(link.lower().endswith(xt) for xt in ('jpg', 'gif', 'png', 'svg')):
                    return F'({__gitraw__}master/{link})'
                else:
                    return F'({__github__}blob/master/{link})'
            readme = README.read()
            return re.sub(R'(?<=\])\((?!\w+://)(.*?)\)', complete_link, readme)

    def get_setup_common() -> dict:
        return dict(
            version=streamsplit.__version__,
            long_description=get_setup_readme(),
            author=__author__,
            description=__slogan__,
            long_description_content_type='text/markdown',
            url=__github__,
            python_requires=F'>={__minver__}',
            classifiers=__topics__,
        )

    ppcfg: dict[str, dict] = toml.load(here.joinpath('pyproject.toml'))
    options = ppcfg.get('tool', {}).get('streamsplit', {})
    requirements: list[str] = list(options.get('requires', []))
    extras: dict[str, list[str]] = dict(options.get('extras', {}))
    extras['all'] = sorted({dep for deps in extras.values() for dep in deps})

    config = get_setup_common()
    config.update(
        name=streamsplit.__distribution__,
        packages=setuptools.find_packages(include=('streamsplit*',)),
        install_requires=requirements,
        extras_require=extras,
        include_package_data=True,
        entry_points={'console_scripts': ['streamsplit=streamsplit.shell:main']},
    )

    return config


if __name__ == '__main__':
    setuptools.setup(**get_config())
