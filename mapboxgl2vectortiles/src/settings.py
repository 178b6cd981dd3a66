from os.path import dirname, join
from tomllib import load

_PLUGIN_DIR = dirname(dirname(__file__))
_RESOURCES = join(_PLUGIN_DIR, 'resources')
_CONF = join(_RESOURCES, 'conf.toml')

with open(_CONF, "rb") as conf_file:
    _STYLE_CONF = load(conf_file)

_CONVERSION_CONF = _STYLE_CONF['CONVERSION']
_SPRITES_CONF = _STYLE_CONF['SPRITES']
_FONTS_CONF = _STYLE_CONF['FONTS']
