# vmr

`vmr` holds the building blocks of an SDK version manager: its settings
file, the URLs and proxies used for downloads, the on-disk layout of
installed versions, per-project version locks, environment variables for
an installed SDK, a cached downloader and post-install fix-ups for a few
SDKs. A small command line edits the settings.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

The `vmr` command changes the settings stored in `~/.vmr/conf.toml`.

```
vmr version                              # print the tag and short hash (alias: v)
vmr set-proxy http://127.0.0.1:2023      # local proxy for downloads (alias: sp)
vmr set-reverse-proxy https://proxy.example.com/proxy/   # aliases: sr, srp
vmr set-download-threads 2               # aliases: sdt, st
vmr toggle-customed-mirrors              # aliases: tcm, tm
```

A command that needs a value prints its help when none is given. Running
`vmr` with no command prints the general help. `set-download-threads`
stores at least 1.

`vmr version` prints the values of `vmr.cli.GIT_TAG` and the first seven
characters of `vmr.cli.GIT_HASH`; both are empty unless set by whoever
builds the package.

## Directory layout

`vmr.config` creates these directories on demand, under `~/.vmr` by default:

| Function             | Path                     | Purpose                                   |
|----------------------|--------------------------|-------------------------------------------|
| `conf_file_path()`   | `conf.toml`              | settings                                  |
| `versions_dir()`     | `versions/`              | installed SDKs, one `<sdk>_versions` each |
| `cache_dir()`        | `cache/`                 | downloads, as `<sdk>/<version>/<file>`    |
| `temp_dir()`         | `temp/`                  | scratch space for unpacking               |
| `install_conf_dir()` | `install_confs/`         | installation configuration files          |
| `plugin_dir()`       | `plugins/`               | plugin files                              |

Setting `VMR_SDK_INSTALLATION_DIR` moves `versions/` and `cache/` under
that directory.

Inside `versions/`, `vmr.layout` places a version of an SDK at
`<sdk>_versions/<plugin>-<version>` (`install_dir`) and the link to the
current version at `<sdk>_versions/<sdk>` (`symlink_path`).
`installer_config_from_dict` turns parsed TOML into an `InstallerConfig`
(flag files, binary directories, binary rename, additional variables) and
raises `ValueError` on values of the wrong type.

## Settings and environment variables

`vmr.config.VMRConf` is a dataclass mirroring `conf.toml`. `new_conf()`
loads it and copies its values into these variables:

- `VMR_SDK_INSTALLATION_DIR`: where SDKs are installed
- `VMR_HOST`: the host that serves the version lists
- `VMR_LOCAL_PROXY`: the local proxy for downloads
- `VMR_REVERSE_PROXY`: the reverse proxy put in front of GitHub downloads
- `VMR_DOWNLOAD_THREADS`: download threads for large files (only when above 1)
- `VMR_USE_CUSTOMED_MIRRORS`: `true` or `false`, always set
- `VMR_ALLOW_NESTED_SESSIONS`: set to `true` when nested sessions are allowed

Each setter (`set_proxy_uri`, `set_reverse_proxy`, `set_version_host_url`,
`set_download_thread_num`, `set_github_token`, `set_cache_retention_time`,
and the `toggle_*` methods) reloads the file, changes one value and saves.

## Downloads

```python
from vmr.config import new_conf
from vmr.network import prepare_fetch, version_file_url

conf = new_conf()
target = prepare_fetch(version_file_url("go"))
print(target.url, target.proxy, target.thread_num)
```

`prepare_fetch` rewrites the URL through `customed_mirrors.toml` when
mirrors are enabled (the file is fetched into `~/.vmr` on first use), puts
the reverse proxy in front of GitHub URLs when no local proxy is set, and
picks the thread count (always 1 for `.json` and `.toml` files).

`vmr.download.Downloader().download(sdk, version, SDKFile(url=...))` stores
the file in the cache, reuses a cached copy unless `force=True`, checks the
checksum when `sum` and `sum_type` are given, and returns the path, or
`None` when the download fails or is 100 bytes or smaller.

## Other helpers

- `vmr.locker.VersionLocker` finds `.vmr.lock` in the working directory or
  a parent, reads it (a JSON object, or an older single `name@version`
  line) and writes it back as JSON. `remove_global_sdk_path` drops an
  SDK's globally linked directory from `PATH`.
- `vmr.envs.collect_envs` maps variable names to existing directories of
  an installed version; `add_envs_temporarily` applies them to the current
  process when `VMR_ADD_TO_PATH_TEMPORARILY` is true.
- `vmr.conda` parses `conda search` output (`parse_search_result`) and
  names the conda platform subdir (`conda_platform`).
- `vmr.cache.CachedFileFinder` deletes cached downloads of a plugin or of
  one version.
- `vmr.post.run_post_install` runs the fix-ups for php, bun, clojure, upx
  and zig; `register_post_install_handler` adds one for another SDK.

## What this package does not do

It does not install, switch or uninstall SDK versions: there is no
archive unpacking, no link creation, no shell profile editing, no running
of conda or other installers, no version listing or search against the
remote version files, and no interactive screens or terminal sessions.
The command line only edits settings.