from cinemax.db.session import Base
from cinemax.models.movie import Movie
from cinemax.models.hall import Hall
from cinemax.models.screening import Screening
from cinemax.models.booking import Booking
