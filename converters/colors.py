"""Wolai color names and their hex values."""

from types import MappingProxyType

# https://www.wolai.com/wolai/o2v1vrLkP2qUuZTH6iDZY9
FRONT_COLOR_HEX = MappingProxyType({
    'gray': '#8C8C8C',
    'dark_gray': '#5C5C5C',
    'brown': '#A3431F',
    'orange': '#F06B05',
    'yellow': '#DFAB01',
    'green': '#038766',
    'blue': '#0575C5',
    'indigo': '#4A52C7',
    'purple': '#8831CC',
    'pink': '#C815B6',
    'red': '#E91E2C',
    'default': '#000000',
})

# https://www.wolai.com/wolai/fNb4SHWY1bV2s8Xg5JYUE4
BACK_COLOR_HEX = MappingProxyType({
    'cultured_background': '#F3F3F3',
    'light_gray_background': '#E3E3E3',
    'apricot_background': '#EFDFDB',
    'vivid_tangerine_background': '#FCE5D7',
    'blond_background': '#FCF5D6',
    'aero_blue_background': '#D7EAE5',
    'uranian_blue_background': '#D7E7F4',
    'lavender_blue_background': '#E0E2F5',
    'pale_purple_background': '#EADDF6',
    'pink_lavender_background': '#F5D9F2',
    'light_pink_background': '#FBDADC',
    'fluorescent_yellow_background': '#FFF784',
    'fluorescent_green_background': '#CDF7AD',
    'fluorescent_green2_background': '#A6F9CB',
    'fluorescent_blue_background': '#A8FFFF',
    'fluorescent_purple_background': '#FDB7FF',
    'fluorescent_purple2_background': '#CCC4FF',
    'default': '#FFFFFF',
})


__all__ = ['FRONT_COLOR_HEX', 'BACK_COLOR_HEX']
