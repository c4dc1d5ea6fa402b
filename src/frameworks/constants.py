"""Framework identifier names and other fixed framework strings."""


class FrameworkIdentifiers:  # pylint: disable=too-few-public-methods
    """Canonical long-form framework identifiers."""

    NET_CORE_APP = ".NETCoreApp"
    NET_STANDARD_APP = ".NETStandardApp"
    NET_STANDARD = ".NETStandard"
    NET_PLATFORM = ".NETPlatform"
    NET = ".NETFramework"
    NET_CORE = ".NETCore"
    WINRT = "WinRT"
    NET_MICRO = ".NETMicroFramework"
    PORTABLE = ".NETPortable"
    WINDOWS_PHONE = "WindowsPhone"
    WINDOWS = "Windows"
    WINDOWS_PHONE_APP = "WindowsPhoneApp"
    DNX = "DNX"
    DNX_CORE = "DNXCore"
    ASP_NET = "ASP.NET"
    ASP_NET_CORE = "ASP.NETCore"
    SILVERLIGHT = "Silverlight"
    NATIVE = "native"
    MONO_ANDROID = "MonoAndroid"
    MONO_TOUCH = "MonoTouch"
    MONO_MAC = "MonoMac"
    XAMARIN_IOS = "Xamarin.iOS"
    XAMARIN_MAC = "Xamarin.Mac"
    XAMARIN_PLAYSTATION3 = "Xamarin.PlayStation3"
    XAMARIN_PLAYSTATION4 = "Xamarin.PlayStation4"
    XAMARIN_PLAYSTATION_VITA = "Xamarin.PlayStationVita"
    XAMARIN_WATCH_OS = "Xamarin.WatchOS"
    XAMARIN_TV_OS = "Xamarin.TVOS"
    XAMARIN_XBOX360 = "Xamarin.Xbox360"
    XAMARIN_XBOX_ONE = "Xamarin.XboxOne"
    UAP = "UAP"
    TIZEN = "Tizen"
    NANO_FRAMEWORK = ".NETnanoFramework"


class FrameworkSpecialNames:  # pylint: disable=too-few-public-methods
    """Identifiers of the non-specific frameworks."""

    ANY = "Any"
    AGNOSTIC = "Agnostic"
    UNSUPPORTED = "Unsupported"


SPECIAL_NAMES = {
    FrameworkSpecialNames.ANY.lower(): FrameworkSpecialNames.ANY,
    FrameworkSpecialNames.AGNOSTIC.lower(): FrameworkSpecialNames.AGNOSTIC,
    FrameworkSpecialNames.UNSUPPORTED.lower(): FrameworkSpecialNames.UNSUPPORTED,
}

# Frameworks whose short version keeps a single digit ("win8", "wp7", "sl5").
SINGLE_DIGIT_VERSION_FRAMEWORKS = {
    FrameworkIdentifiers.WINDOWS.lower(),
    FrameworkIdentifiers.WINDOWS_PHONE.lower(),
    FrameworkIdentifiers.SILVERLIGHT.lower(),
}

# Frameworks whose short version is always dotted ("netstandard2.0").
DECIMAL_POINT_FRAMEWORKS = {
    FrameworkIdentifiers.NET_CORE_APP.lower(),
    FrameworkIdentifiers.NET_STANDARD.lower(),
}

PORTABLE_PROFILE_PREFIX = "profile"
PORTABLE_PROFILE_NUMBER_MAX_LENGTH = 3
