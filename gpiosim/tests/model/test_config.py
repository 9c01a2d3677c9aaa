import pytest
from pydantic import ValidationError

from gpiosim.model import GpioConfig


class TestGpioConfig:
    def test_defaults(self):
        cfg = GpioConfig()
        assert cfg.pin_count == 32
        assert cfg.sync_stages == 2
        assert cfg.debounce_width == 16
        assert cfg.pin_mask == 0xFFFF_FFFF
        assert cfg.debounce_mask == 0xFFFF

    def test_camel_case_aliases(self):
        cfg = GpioConfig.model_validate({"pinCount": 8, "syncStages": 3, "baseAddress": 0x40})
        assert (cfg.pin_count, cfg.sync_stages, cfg.base_address) == (8, 3, 0x40)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"pin_count": 0},
            {"pin_count": 33},
            {"sync_stages": 0},
            {"debounce_width": 0},
            {"base_address": 0x2},
            {"address_width": 4},
            {"unknown_option": 1},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            GpioConfig(**kwargs)

    def test_assignment_is_validated(self):
        cfg = GpioConfig()
        with pytest.raises(ValidationError):
            cfg.pin_count = 64

    def test_to_offset(self):
        cfg = GpioConfig(base_address=0x4000_0000, address_width=8)
        assert cfg.to_offset(0x4000_0010) == 0x10
        assert cfg.to_offset(0x4000_0110) == 0x10
