"""CoursePath - sequential video course platform backed by Supabase."""

__version__ = "0.1.0"
